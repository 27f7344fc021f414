# =============================================================================
# fieldsync_core/services/maternal_health_service.py
# Pre-pregnancy risk screening submissions
# =============================================================================

from typing import Any, Dict, Optional

from fieldsync_core.api import RemoteClient
from fieldsync_core.cache import LAST_PREDICTION_KEY, LastResultCache
from fieldsync_core.errors import ServerError
from fieldsync_core.models import PredictionSummary
from fieldsync_core.models.validation import validate_maternal_health
from fieldsync_core.sync import ServiceResult
from .base_service import BaseService

PREDICTION_PATH = "/maternal-health"

INTEGER_FIELDS = ("age", "past_pregnancy_count", "years_since_last_pregnancy")
MULTI_CHOICE_FIELDS = ("medical_bg_mother", "medical_bg_father")


def build_payload(draft: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce form values into the body expected by the prediction service."""
    payload = dict(draft)
    for key in INTEGER_FIELDS:
        payload[key] = int(float(draft[key]))
    payload["haemoglobin"] = float(draft["haemoglobin"])
    for key in MULTI_CHOICE_FIELDS:
        choices = draft[key]
        if isinstance(choices, (list, tuple)):
            # "None" only counts when nothing else was picked
            if "None" in choices and len(choices) > 1:
                choices = [c for c in choices if c != "None"]
            payload[key] = ",".join(choices)
    return payload


class MaternalHealthService(BaseService):
    """Submits screenings to the prediction service and keeps the last result."""

    def __init__(self, client: RemoteClient, cache: LastResultCache):
        super().__init__()
        self.client = client
        self.cache = cache

    def submit(self, draft: Dict[str, Any]) -> ServiceResult:
        """
        Send a screening form for prediction.

        Returns:
            ServiceResult with the raw prediction envelope
        """
        missing = validate_maternal_health(draft)
        if missing:
            return self.rejected(missing)
        try:
            payload = build_payload(draft)
        except (TypeError, ValueError) as e:
            return self.rejected([f"numeric field ({e})"], prefix="Invalid value")
        return self.safe_execute("Requesting risk prediction", self._submit, payload)

    def _submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        envelope = self.client.call("POST", PREDICTION_PATH, body=payload)
        if "prediction" not in envelope:
            raise ServerError("Prediction missing from response", path=PREDICTION_PATH)
        self.cache.save(LAST_PREDICTION_KEY, envelope)
        return envelope

    def last_prediction(self) -> Optional[Dict[str, Any]]:
        """Envelope of the most recent prediction, if one is cached."""
        envelope = self.cache.load(LAST_PREDICTION_KEY)
        return envelope if isinstance(envelope, dict) else None

    @staticmethod
    def summarize(envelope: Dict[str, Any]) -> PredictionSummary:
        return PredictionSummary.from_payload(envelope)
