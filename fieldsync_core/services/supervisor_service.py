# =============================================================================
# fieldsync_core/services/supervisor_service.py
# Supervisor dashboard and field-worker management
# =============================================================================

from typing import Any, Dict, List, Optional

from fieldsync_core.api import RemoteClient
from fieldsync_core.models import FieldWorker, SupervisorDashboard
from fieldsync_core.models.records import now_iso
from fieldsync_core.models.validation import validate_field_worker
from fieldsync_core.sync import LocalCollection, OptimisticMutator, ServiceResult
from .base_service import BaseService

DASHBOARD_PATH = "/supervisor/dashboard"
FIELD_WORKERS_PATH = "/supervisor/fieldworkers"


def build_payload(draft: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": str(draft.get("name", "")).strip(),
        "area": str(draft.get("area", "")).strip(),
        "status": draft.get("status", "active"),
        "deviceStatus": draft.get("deviceStatus", "online"),
        "patientsToday": int(float(draft.get("patientsToday", 0))),
        "highRiskCases": int(float(draft.get("highRiskCases", 0))),
    }


class SupervisorService(BaseService):
    """View model for the supervisor dashboard."""

    def __init__(self, client: RemoteClient):
        super().__init__()
        self.client = client
        self.workers = LocalCollection()
        self.mutator = OptimisticMutator(entity_factory=FieldWorker.from_dict)
        self.alerts: List[Dict[str, Any]] = []
        self.metrics: Dict[str, Any] = {}
        self.error: Optional[str] = None

    @property
    def field_workers(self) -> List[FieldWorker]:
        return self.workers.items()

    def load_dashboard(self) -> ServiceResult:
        result = self.safe_execute("Loading supervisor dashboard", self._fetch_dashboard)
        if result:
            dashboard = result.data
            self.alerts = dashboard.alerts
            self.metrics = dashboard.metrics
            self.workers.replace_all(dashboard.field_workers)
            self.error = None
        else:
            self.error = result.error
        return result

    def _fetch_dashboard(self) -> SupervisorDashboard:
        return SupervisorDashboard.from_dict(self.client.call("GET", DASHBOARD_PATH))

    def add_field_worker(self, draft: Dict[str, Any]) -> ServiceResult:
        """
        Add a worker optimistically under a temporary id.

        The worker shows up at the top of the list immediately; it is swapped
        for the server copy on success and removed on failure.
        """
        problems = validate_field_worker(draft)
        if problems:
            return self.rejected(problems, prefix="Invalid field worker")
        return self.mutator.create(self.workers, build_payload(draft), submit=self._submit_worker)

    def _submit_worker(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        created = self.client.call("POST", FIELD_WORKERS_PATH, body=payload)
        return {**created, "lastSync": created.get("lastSync") or now_iso()}
