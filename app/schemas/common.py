from enum import Enum
from pydantic import BaseModel


class RuleCategory(str, Enum):
    """Built-in rule categories.

    The catalog accepts any non-empty category; these are the ones the
    default rules use.
    """

    GPS_MONITORING = "GPS Monitoring"
    DRIVER_MONITORING = "Driver Monitoring"
    SAFETY_EMERGENCY = "Safety & Emergency"
    COMPLIANCE = "Compliance"
    ACHIEVEMENT = "Achievement"


class SuccessResponse(BaseModel):
    """Generic success response base."""

    success: bool = True


class MessageResponse(SuccessResponse):
    message: str
