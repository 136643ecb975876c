"""
Event tier classification and affiliation rules.

Everything here is pure: no I/O, no database. The faculty attribute check
lives in the affiliation service and is driven by `TierRequirement.faculty`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional

from app.core.config import RegistrationPolicy
from habba_shared.schemas.common import IneligibleReason, Tier


class TierRequirement(NamedTuple):
    privileged_prefix: bool
    faculty: bool


TIER_REQUIREMENTS: dict[Tier, TierRequirement] = {
    Tier.OPEN: TierRequirement(privileged_prefix=False, faculty=False),
    Tier.RESTRICTED_AFFILIATION: TierRequirement(privileged_prefix=True, faculty=False),
    Tier.FACULTY_ONLY: TierRequirement(privileged_prefix=True, faculty=True),
}


@dataclass(frozen=True)
class EligibilityVerdict:
    allowed: bool
    tier: Tier
    reason: Optional[IneligibleReason] = None


def _tier_table(policy: RegistrationPolicy) -> list[tuple[Tier, frozenset[str]]]:
    # Most restrictive first; the policy guarantees the sets are disjoint.
    return [
        (Tier.FACULTY_ONLY, policy.faculty_only_events),
        (Tier.RESTRICTED_AFFILIATION, policy.restricted_affiliation_events),
    ]


def classify(event_id: str, policy: RegistrationPolicy) -> Tier:
    """Map an event id to its tier. Ids in neither configured set are open."""
    for tier, members in _tier_table(policy):
        if event_id in members:
            return tier
    return Tier.OPEN


def check_affiliation(
    tier: Tier, prefix: Optional[str], policy: RegistrationPolicy
) -> Optional[IneligibleReason]:
    """Return the rejection reason for the prefix rule, or None if it passes."""
    if not TIER_REQUIREMENTS[tier].privileged_prefix:
        return None
    if prefix is None or prefix != policy.privileged_prefix:
        return IneligibleReason.WRONG_AFFILIATION
    return None


def evaluate(
    tier: Tier,
    prefix: Optional[str],
    policy: RegistrationPolicy,
    is_faculty: Optional[bool] = None,
) -> EligibilityVerdict:
    """
    Combine the prefix rule and, for faculty-only tiers, the faculty flag.

    `is_faculty` is only consulted when the tier needs it; pass None when the
    lookup has not been made (the verdict then reflects the prefix rule only).
    """
    reason = check_affiliation(tier, prefix, policy)
    if reason is not None:
        return EligibilityVerdict(allowed=False, tier=tier, reason=reason)
    if TIER_REQUIREMENTS[tier].faculty and is_faculty is False:
        return EligibilityVerdict(
            allowed=False, tier=tier, reason=IneligibleReason.NOT_FACULTY
        )
    return EligibilityVerdict(allowed=True, tier=tier)
