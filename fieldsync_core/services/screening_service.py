# =============================================================================
# fieldsync_core/services/screening_service.py
# Recent screenings and the "mark surveyed" action
# =============================================================================

from typing import List, Optional

import pandas as pd

from fieldsync_core.api import RemoteClient
from fieldsync_core.models import ScreeningRecord
from fieldsync_core.sync import LocalCollection, OptimisticMutator, ServiceResult
from .base_service import BaseService

RECENT_PATH = "/dashboard/last20"
SURVEY_PATH = "/dashboard/survey/{id}"


class ScreeningService(BaseService):
    """
    View model for the last 20 screenings.

    A failed reload keeps the rows already on screen and records the error.
    """

    def __init__(self, client: RemoteClient):
        super().__init__()
        self.client = client
        self.collection = LocalCollection()
        self.mutator = OptimisticMutator()
        self.error: Optional[str] = None
        self.loading = False

    @property
    def records(self) -> List[ScreeningRecord]:
        return self.collection.items()

    def load_recent(self) -> ServiceResult:
        self.loading = True
        try:
            result = self.safe_execute("Loading recent screenings", self._fetch_recent)
        finally:
            self.loading = False

        if result:
            self.collection.replace_all(result.data)
            self.error = None
        else:
            self.error = result.error
        return result

    def _fetch_recent(self) -> List[ScreeningRecord]:
        payload = self.client.call("GET", RECENT_PATH)
        return [ScreeningRecord.from_dict(row) for row in payload.get("data") or []]

    def mark_surveyed(self, record_id: int) -> ServiceResult:
        """Optimistically flag a screening as surveyed."""
        result = self.mutator.toggle(
            self.collection,
            record_id,
            "surveyed",
            submit=self._submit_survey,
        )
        if not result:
            self.logger.warning(f"Could not mark {record_id} surveyed: {result.error}")
        return result

    def _submit_survey(self, record_id: int) -> None:
        self.client.call("PATCH", SURVEY_PATH.format(id=record_id))

    def as_frame(self) -> pd.DataFrame:
        """Screenings as a table, one row per record."""
        rows = [record.to_dict() for record in self.records]
        if not rows:
            return pd.DataFrame(columns=["id", "name", "age", "surveyed", "created_at", "reminder_date"])
        return pd.DataFrame(rows).set_index("id", drop=False)
