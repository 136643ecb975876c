from enum import Enum
from typing import Optional
from pydantic import BaseModel

class Tier(str, Enum):
    OPEN = "open"
    RESTRICTED_AFFILIATION = "restricted-affiliation"
    FACULTY_ONLY = "faculty-only"

class IneligibleReason(str, Enum):
    WRONG_AFFILIATION = "wrong-affiliation"
    NOT_FACULTY = "not-faculty"

class RegistrationErrorCode(str, Enum):
    INELIGIBLE = "INELIGIBLE"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    UNKNOWN_REFERENCE = "UNKNOWN_REFERENCE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

# Topic every device may join for festival-wide broadcasts
BROADCAST_TOPIC = "ALL"

class ErrorDetail(BaseModel):
    """The `detail` payload of an error response."""
    code: str
    message: str
    reason: Optional[str] = None
