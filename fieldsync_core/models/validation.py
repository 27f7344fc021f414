# =============================================================================
# fieldsync_core/models/validation.py
# Draft validation for forms submitted through the sync layer
# =============================================================================
"""
Each validator returns a list of human-readable problems; an empty list
means the draft can be sent.
"""

import re
from typing import Any, Dict, List

from .records import DEVICE_STATUSES, FIELD_WORKER_STATUSES

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

MATERNAL_HEALTH_FIELDS = (
    "name",
    "age",
    "past_pregnancy_count",
    "blood_group_mother",
    "blood_group_father",
    "medical_bg_mother",
    "medical_bg_father",
    "years_since_last_pregnancy",
    "delivery_type",
    "haemoglobin",
)


def _blank(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return not str(value if value is not None else "").strip()


def _non_negative_number(value: Any) -> bool:
    try:
        return float(value) >= 0
    except (TypeError, ValueError):
        return False


def validate_sign_up(username: str, govt_id: str, email: str, password: str, confirm: str) -> List[str]:
    if any(_blank(v) for v in (username, govt_id, email, password, confirm)):
        return ["Please fill all fields."]
    problems = []
    if not EMAIL_PATTERN.match(email.strip()):
        problems.append("Please enter a valid email.")
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if password != confirm:
        problems.append("Passwords do not match.")
    return problems


def validate_sign_in(email: str, password: str) -> List[str]:
    if _blank(email) or _blank(password):
        return ["Please enter both email and password."]
    return []


def validate_field_worker(draft: Dict[str, Any]) -> List[str]:
    problems = []
    if _blank(draft.get("name")):
        problems.append("Name is required")
    if _blank(draft.get("area")):
        problems.append("Area is required")
    if draft.get("status", "active") not in FIELD_WORKER_STATUSES:
        problems.append("Invalid status")
    if draft.get("deviceStatus", "online") not in DEVICE_STATUSES:
        problems.append("Invalid device status")
    if not _non_negative_number(draft.get("patientsToday", 0)):
        problems.append("Patients Today must be 0 or more")
    if not _non_negative_number(draft.get("highRiskCases", 0)):
        problems.append("High Risk Cases must be 0 or more")
    return problems


def validate_post_delivery(draft: Dict[str, Any]) -> List[str]:
    problems = []
    if _blank(draft.get("mother_name")):
        problems.append("Mother's name")
    if _blank(draft.get("delivery_date")):
        problems.append("Delivery date")
    weight = draft.get("child_weight_kg", draft.get("child_weight"))
    try:
        if float(weight) <= 0:
            problems.append("Valid Child weight")
    except (TypeError, ValueError):
        problems.append("Valid Child weight")
    return problems


def validate_maternal_health(draft: Dict[str, Any]) -> List[str]:
    return [key for key in MATERNAL_HEALTH_FIELDS if _blank(draft.get(key))]
