# =============================================================================
# fieldsync_core/services/post_delivery_service.py
# Post-delivery records: paginated list, submission, last-record cache
# =============================================================================

from typing import Any, Dict, Optional

import pandas as pd

from fieldsync_core.api import RemoteClient
from fieldsync_core.cache import LAST_POST_DELIVERY_KEY, LastResultCache
from fieldsync_core.errors import ServerError
from fieldsync_core.models import PostDeliveryRecord
from fieldsync_core.models.records import now_iso
from fieldsync_core.models.validation import validate_post_delivery
from fieldsync_core.sync import PaginatedCollectionLoader, ServiceResult
from .base_service import BaseService

COLLECTION_PATH = "/post-delivery"
RECORD_PATH = "/post-delivery/{id}"


def build_payload(draft: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize a form draft into the POST /post-delivery body."""
    diseases = draft.get("child_diseases") or []
    if isinstance(diseases, str):
        diseases = diseases.split(",")
    weight = draft.get("child_weight_kg", draft.get("child_weight"))
    return {
        "mother_name": str(draft.get("mother_name", "")).strip(),
        "delivery_date": draft.get("delivery_date"),
        "complications": (draft.get("complications") or "").strip() or None,
        "child_weight_kg": float(weight),
        "child_diseases": [d.strip() for d in diseases if d and d.strip()],
        "notes": (draft.get("notes") or "").strip() or None,
        "submitted_at": draft.get("submitted_at") or now_iso(),
    }


class PostDeliveryService(BaseService):
    """View model for post-delivery follow-ups."""

    def __init__(self, client: RemoteClient, cache: LastResultCache, page_size: int = 25):
        super().__init__()
        self.client = client
        self.cache = cache
        self.loader: PaginatedCollectionLoader[PostDeliveryRecord] = PaginatedCollectionLoader(
            client,
            COLLECTION_PATH,
            page_size=page_size,
            item_factory=PostDeliveryRecord.from_dict,
        )

    def submit(self, draft: Dict[str, Any]) -> ServiceResult:
        """
        Send a new record and remember it as the last submission.

        Returns:
            ServiceResult with the created PostDeliveryRecord
        """
        problems = validate_post_delivery(draft)
        if problems:
            return self.rejected(problems)
        return self.safe_execute("Submitting post-delivery record", self._submit, build_payload(draft))

    def _submit(self, payload: Dict[str, Any]) -> PostDeliveryRecord:
        response = self.client.call("POST", COLLECTION_PATH, body=payload)
        record = response.get("record")
        if not isinstance(record, dict):
            raise ServerError("The server did not return the saved record", path=COLLECTION_PATH)
        self.cache.save(LAST_POST_DELIVERY_KEY, record)
        return PostDeliveryRecord.from_dict(record)

    def get(self, record_id: int) -> ServiceResult:
        """Fetch one record by id."""
        return self.safe_execute(f"Loading post-delivery record {record_id}", self._get, record_id)

    def _get(self, record_id: int) -> PostDeliveryRecord:
        path = RECORD_PATH.format(id=record_id)
        response = self.client.call("GET", path)
        record = response.get("record")
        if not isinstance(record, dict):
            raise ServerError("Record missing from response", path=path)
        return PostDeliveryRecord.from_dict(record)

    def last_record(self) -> Optional[PostDeliveryRecord]:
        """Most recent submission from this device, if any."""
        raw = self.cache.load(LAST_POST_DELIVERY_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return PostDeliveryRecord.from_dict(raw)
        except (KeyError, TypeError, ValueError):
            self.logger.warning("Cached post-delivery record is incomplete")
            return None

    def dismiss_last_record(self) -> None:
        self.cache.clear(LAST_POST_DELIVERY_KEY)

    def as_frame(self) -> pd.DataFrame:
        """Current page as a table."""
        rows = [record.to_dict() for record in self.loader.state.items]
        columns = ["id", "mother_name", "delivery_date", "child_weight_kg",
                   "complications", "child_diseases", "notes", "submitted_at"]
        frame = pd.DataFrame(rows, columns=columns)
        frame["child_diseases"] = frame["child_diseases"].apply(
            lambda values: ", ".join(values) if isinstance(values, list) else values
        )
        return frame
