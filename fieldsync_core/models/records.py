# =============================================================================
# fieldsync_core/models/records.py
# Domain records exchanged with the field-operations API
# =============================================================================

from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar, Union

T = TypeVar("T")

TEMP_ID_PREFIX = "temp-"

FIELD_WORKER_STATUSES = ("active", "inactive", "offline")
DEVICE_STATUSES = ("online", "offline")

# Model output flag -> complication name
COMPLICATION_FLAGS = {
    "flag_0": "Miscarriage",
    "flag_1": "Stillbirth",
    "flag_2": "Obstructed labour",
    "flag_3": "Placenta previa",
    "flag_4": "Placental abruption",
    "flag_5": "IUGR",
    "flag_6": "Eclampsia",
    "flag_7": "Postpartum depression",
    "flag_8": "Infection",
    "flag_9": "Excessive bleeding",
    "flag_10": "Multiple pregnancy complication",
    "flag_11": "Preterm labour",
    "flag_12": "C-section complication",
    "flag_13": "Anaemia",
    "flag_14": "Short inter-pregnancy interval",
}


def is_temp_id(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(TEMP_ID_PREFIX)


def now_iso() -> str:
    return datetime.now().isoformat()


# =============================================================================
# PAGINATION
# =============================================================================

def total_pages(total: int, page_size: int) -> int:
    """Number of pages for total items; an empty collection has one page."""
    if total <= 0:
        return 1
    return math.ceil(total / page_size)


def clamp_page(page: int, total: int, page_size: int) -> int:
    return max(1, min(int(page), total_pages(total, page_size)))


@dataclass(frozen=True)
class CollectionPage(Generic[T]):
    """Immutable snapshot of one page of a remote collection"""
    items: Tuple[T, ...] = ()
    page: int = 1
    page_size: int = 25
    total: int = 0
    loading: bool = False
    error: Optional[str] = None

    def __post_init__(self):
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")
        if len(self.items) > self.page_size:
            raise ValueError("A page cannot hold more items than page_size")

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def evolve(self, **changes) -> CollectionPage[T]:
        return replace(self, **changes)


# =============================================================================
# RECORDS
# =============================================================================

@dataclass
class ScreeningRecord:
    """Pre-pregnancy screening row from /dashboard/last20"""
    id: int
    name: Optional[str] = None
    age: Optional[int] = None
    surveyed: bool = False
    created_at: Optional[str] = None
    reminder_date: Optional[str] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ScreeningRecord:
        known = {"id", "name", "age", "surveyed", "created_at", "reminder_date"}
        return cls(
            id=int(data["id"]),
            name=data.get("name"),
            age=data.get("age"),
            surveyed=bool(data.get("surveyed", False)),
            created_at=data.get("created_at"),
            reminder_date=data.get("reminder_date"),
            fields={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.fields,
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "surveyed": self.surveyed,
            "created_at": self.created_at,
            "reminder_date": self.reminder_date,
        }


@dataclass(frozen=True)
class PostDeliveryRecord:
    """Post-delivery follow-up; immutable once created"""
    id: int
    mother_name: str
    delivery_date: str
    child_weight_kg: Optional[float] = None
    complications: Optional[str] = None
    child_diseases: Tuple[str, ...] = ()
    notes: Optional[str] = None
    submitted_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PostDeliveryRecord:
        weight = data.get("child_weight_kg", data.get("child_weight"))
        diseases = data.get("child_diseases") or ()
        if isinstance(diseases, str):
            diseases = [d for d in (s.strip() for s in diseases.split(",")) if d]
        return cls(
            id=int(data["id"]),
            mother_name=data.get("mother_name") or "",
            delivery_date=data.get("delivery_date") or "",
            child_weight_kg=float(weight) if weight not in (None, "") else None,
            complications=data.get("complications"),
            child_diseases=tuple(diseases),
            notes=data.get("notes"),
            submitted_at=data.get("submitted_at") or data.get("created_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "mother_name": self.mother_name,
            "delivery_date": self.delivery_date,
            "child_weight_kg": self.child_weight_kg,
            "complications": self.complications,
            "child_diseases": list(self.child_diseases),
            "notes": self.notes,
            "submitted_at": self.submitted_at,
        }


@dataclass
class FieldWorker:
    """Field worker managed from the supervisor dashboard"""
    id: Union[int, str]
    name: str
    area: str
    status: str = "active"
    device_status: str = "online"
    patients_today: int = 0
    high_risk_cases: int = 0
    last_sync: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return is_temp_id(self.id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FieldWorker:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            area=data.get("area", ""),
            status=data.get("status", "active"),
            device_status=data.get("deviceStatus", data.get("device_status", "online")),
            patients_today=int(data.get("patientsToday", data.get("patients_today", 0)) or 0),
            high_risk_cases=int(data.get("highRiskCases", data.get("high_risk_cases", 0)) or 0),
            last_sync=data.get("lastSync", data.get("last_sync")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "area": self.area,
            "status": self.status,
            "deviceStatus": self.device_status,
            "patientsToday": self.patients_today,
            "highRiskCases": self.high_risk_cases,
            "lastSync": self.last_sync,
        }


# =============================================================================
# PREDICTION
# =============================================================================

def placeholder_overall_risk(risk: List[Any]) -> Optional[float]:
    """
    Overall risk score shown on the prediction screen.

    Placeholder rule max(0, risk[0] - 30) until the scoring owner defines
    a real one. None when the payload has no risk values.
    """
    if not risk:
        return None
    try:
        first = round(float(risk[0]), 3)
    except (TypeError, ValueError):
        return None
    return max(0.0, first - 30.0)


@dataclass(frozen=True)
class PredictionSummary:
    """Read-only view over a cached prediction envelope"""
    record_id: Optional[Any]
    probabilities: Dict[str, float]
    risk: Tuple[Any, ...]
    overall_risk: Optional[float]
    record: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> PredictionSummary:
        prediction = payload.get("prediction") or {}
        raw_probs = prediction.get("probabilities") or []
        risk = list(prediction.get("risk") or [])

        # Either a list of {flag: p} mappings or a single mapping
        if isinstance(raw_probs, dict):
            raw_probs = [raw_probs]
        probabilities: Dict[str, float] = {}
        for entry in raw_probs:
            if not isinstance(entry, dict):
                continue
            for flag, value in entry.items():
                label = COMPLICATION_FLAGS.get(flag, flag)
                try:
                    probabilities[label] = float(value)
                except (TypeError, ValueError):
                    continue

        return cls(
            record_id=payload.get("id"),
            probabilities=probabilities,
            risk=tuple(risk),
            overall_risk=placeholder_overall_risk(risk),
            record=dict(payload.get("record") or {}),
        )

    def top_risks(self, n: int = 3) -> List[Tuple[str, float]]:
        """Highest-probability complications first"""
        ranked = sorted(self.probabilities.items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:n]


@dataclass
class SupervisorDashboard:
    """Alerts, field workers and headline metrics for a supervisor"""
    alerts: List[Dict[str, Any]] = field(default_factory=list)
    field_workers: List[FieldWorker] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SupervisorDashboard:
        return cls(
            alerts=list(data.get("alerts") or []),
            field_workers=[FieldWorker.from_dict(w) for w in data.get("fieldWorkers") or []],
            metrics=dict(data.get("metrics") or {}),
        )
