"""
Domain models for the field-operations sync layer.
"""

from .session import Session, UserProfile
from .records import (
    CollectionPage,
    ScreeningRecord,
    PostDeliveryRecord,
    FieldWorker,
    PredictionSummary,
    SupervisorDashboard,
    COMPLICATION_FLAGS,
    TEMP_ID_PREFIX,
    is_temp_id,
    placeholder_overall_risk,
    total_pages,
    clamp_page,
)

__all__ = [
    "Session",
    "UserProfile",
    "CollectionPage",
    "ScreeningRecord",
    "PostDeliveryRecord",
    "FieldWorker",
    "PredictionSummary",
    "SupervisorDashboard",
    "COMPLICATION_FLAGS",
    "TEMP_ID_PREFIX",
    "is_temp_id",
    "placeholder_overall_risk",
    "total_pages",
    "clamp_page",
]
