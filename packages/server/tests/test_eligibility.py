"""
Unit tests for tier classification and the affiliation rules.

Tests cover:
- Table-driven classification over the configured event sets
- Prefix rule per tier
- Faculty rule only applying to faculty-only events
"""

from __future__ import annotations

import pytest

from app.core.config import RegistrationPolicy
from app.services.eligibility import (
    TIER_REQUIREMENTS,
    check_affiliation,
    classify,
    evaluate,
)
from habba_shared.schemas.common import IneligibleReason, Tier


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassify:
    """Event ids map to exactly one tier."""

    def test_faculty_only_event(self, policy):
        assert classify("13", policy) == Tier.FACULTY_ONLY

    @pytest.mark.parametrize("event_id", ["14", "15", "16"])
    def test_restricted_events(self, policy, event_id):
        assert classify(event_id, policy) == Tier.RESTRICTED_AFFILIATION

    @pytest.mark.parametrize("event_id", ["50", "", "130", " 13"])
    def test_anything_else_is_open(self, policy, event_id):
        assert classify(event_id, policy) == Tier.OPEN

    def test_empty_policy_makes_everything_open(self):
        empty = RegistrationPolicy()
        assert classify("13", empty) == Tier.OPEN

    def test_every_tier_has_requirements(self):
        assert set(TIER_REQUIREMENTS) == set(Tier)


# ---------------------------------------------------------------------------
# Affiliation rules
# ---------------------------------------------------------------------------


class TestCheckAffiliation:
    def test_open_tier_ignores_prefix(self, policy):
        assert check_affiliation(Tier.OPEN, "bd", policy) is None
        assert check_affiliation(Tier.OPEN, None, policy) is None

    @pytest.mark.parametrize("tier", [Tier.RESTRICTED_AFFILIATION, Tier.FACULTY_ONLY])
    def test_privileged_prefix_passes(self, policy, tier):
        assert check_affiliation(tier, "ay", policy) is None

    @pytest.mark.parametrize("tier", [Tier.RESTRICTED_AFFILIATION, Tier.FACULTY_ONLY])
    def test_other_prefix_rejected(self, policy, tier):
        assert check_affiliation(tier, "bd", policy) == IneligibleReason.WRONG_AFFILIATION

    def test_missing_prefix_rejected(self, policy):
        reason = check_affiliation(Tier.RESTRICTED_AFFILIATION, None, policy)
        assert reason == IneligibleReason.WRONG_AFFILIATION

    def test_prefix_comparison_is_case_sensitive(self, policy):
        reason = check_affiliation(Tier.RESTRICTED_AFFILIATION, "AY", policy)
        assert reason == IneligibleReason.WRONG_AFFILIATION


class TestEvaluate:
    def test_faculty_only_requires_faculty(self, policy):
        verdict = evaluate(Tier.FACULTY_ONLY, "ay", policy, is_faculty=False)
        assert not verdict.allowed
        assert verdict.reason == IneligibleReason.NOT_FACULTY

    def test_faculty_only_allows_faculty(self, policy):
        verdict = evaluate(Tier.FACULTY_ONLY, "ay", policy, is_faculty=True)
        assert verdict.allowed
        assert verdict.tier == Tier.FACULTY_ONLY

    def test_wrong_prefix_wins_over_faculty_flag(self, policy):
        verdict = evaluate(Tier.FACULTY_ONLY, "bd", policy, is_faculty=True)
        assert verdict.reason == IneligibleReason.WRONG_AFFILIATION

    def test_restricted_ignores_faculty_flag(self, policy):
        assert evaluate(Tier.RESTRICTED_AFFILIATION, "ay", policy, is_faculty=False).allowed

    def test_pending_faculty_lookup_is_not_a_rejection(self, policy):
        assert evaluate(Tier.FACULTY_ONLY, "ay", policy).allowed
