# =============================================================================
# fieldsync_core/sync/optimistic.py
# Optimistic local mutations with rollback
# =============================================================================
"""
OptimisticMutator - apply a change locally, confirm it remotely, roll it
back if the remote call fails.

Two shapes are supported:
- create(): insert an entity under a temporary id, swap in the server entity
  on success, drop it on failure
- toggle(): set a boolean field to True, restore the previous value on
  failure

Each call applies exactly one outcome (confirm or rollback) before it
returns. An entity with a mutation still in flight cannot be mutated again.
"""

from __future__ import annotations
import dataclasses
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from fieldsync_core.errors import ClientError
from fieldsync_core.logging import get_logger
from fieldsync_core.models.records import TEMP_ID_PREFIX, is_temp_id, now_iso
from .result import ServiceResult

logger = get_logger(__name__)


def entity_id(entity: Any) -> Any:
    if isinstance(entity, dict):
        return entity.get("id")
    return getattr(entity, "id", None)


def get_field(entity: Any, field: str) -> Any:
    if isinstance(entity, dict):
        return entity.get(field)
    return getattr(entity, field)


def with_field(entity: Any, field: str, value: Any) -> Any:
    """Copy of entity with one field changed."""
    if isinstance(entity, dict):
        return {**entity, field: value}
    if dataclasses.is_dataclass(entity):
        return dataclasses.replace(entity, **{field: value})
    raise TypeError(f"Cannot update field on {type(entity).__name__}")


class LocalCollection:
    """
    Ordered, thread-safe list of entities keyed by id.

    Owned by the view model that loaded it. Entities are replaced, never
    mutated in place, so snapshots handed out stay stable.
    """

    def __init__(self, items: Optional[Iterable[Any]] = None):
        self._lock = threading.Lock()
        self._items: List[Any] = list(items or [])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self.items())

    def items(self) -> List[Any]:
        with self._lock:
            return list(self._items)

    def replace_all(self, items: Iterable[Any]) -> None:
        with self._lock:
            self._items = list(items)

    def get(self, key: Any) -> Optional[Any]:
        with self._lock:
            for item in self._items:
                if entity_id(item) == key:
                    return item
        return None

    def prepend(self, entity: Any) -> None:
        with self._lock:
            self._items.insert(0, entity)

    def confirm(self, temp_key: Any, entity: Any) -> None:
        """
        Put a server-confirmed entity where its temporary copy was.

        Falls back to updating an entity with the same id, or prepending,
        when a reload already dropped the temporary copy.
        """
        key = entity_id(entity)
        with self._lock:
            for match in (temp_key, key):
                for index, item in enumerate(self._items):
                    if entity_id(item) == match:
                        self._items[index] = entity
                        return
            self._items.insert(0, entity)

    def remove(self, key: Any) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [item for item in self._items if entity_id(item) != key]
            return len(self._items) != before

    def set_field(self, key: Any, field: str, value: Any) -> Optional[Any]:
        """Replace the entity with a copy carrying field=value."""
        with self._lock:
            for index, item in enumerate(self._items):
                if entity_id(item) == key:
                    updated = with_field(item, field, value)
                    self._items[index] = updated
                    return updated
        return None


class OptimisticMutator:
    """
    Applies optimistic creates and toggles against a LocalCollection.

    Usage:
        mutator = OptimisticMutator(entity_factory=FieldWorker.from_dict)
        result = mutator.create(workers, draft, submit=lambda d: client.post(path, d))
        if not result:
            show(result.error)
    """

    def __init__(self, entity_factory: Optional[Callable[[Dict[str, Any]], Any]] = None):
        self._entity_factory = entity_factory
        self._lock = threading.Lock()
        self._pending: Set[Any] = set()
        self._last_stamp = 0

    def is_pending(self, key: Any) -> bool:
        with self._lock:
            return key in self._pending

    def new_temp_id(self) -> str:
        with self._lock:
            stamp = max(int(time.time() * 1000), self._last_stamp + 1)
            self._last_stamp = stamp
        return f"{TEMP_ID_PREFIX}{stamp}"

    def _build(self, data: Dict[str, Any]) -> Any:
        return self._entity_factory(data) if self._entity_factory else dict(data)

    def _claim(self, key: Any) -> bool:
        with self._lock:
            if key in self._pending:
                return False
            self._pending.add(key)
            return True

    def _release(self, key: Any) -> None:
        with self._lock:
            self._pending.discard(key)

    # =========================================================================
    # CREATE WITH TEMPORARY ID
    # =========================================================================

    def create(
        self,
        collection: LocalCollection,
        draft: Dict[str, Any],
        submit: Callable[[Dict[str, Any]], Dict[str, Any]],
    ) -> ServiceResult:
        """
        Insert draft optimistically, then confirm it with submit(draft).

        Returns:
            ServiceResult with the confirmed entity, or the failure
        """
        temp_id = self.new_temp_id()
        optimistic = self._build({"lastSync": now_iso(), **draft, "id": temp_id})
        self._claim(temp_id)
        collection.prepend(optimistic)

        try:
            created = submit(dict(draft))
            confirmed = self._build(created)
            confirmed_id = entity_id(confirmed)
            if confirmed_id is None or is_temp_id(confirmed_id):
                raise ValueError("Server response has no id for the created entity")
        except ClientError as e:
            collection.remove(temp_id)
            logger.warning(f"Create rolled back ({temp_id}): {e.message}")
            return ServiceResult.from_exception(e)
        except Exception as e:
            collection.remove(temp_id)
            logger.error(f"Create rolled back ({temp_id}): {e}", exc_info=True)
            return ServiceResult.fail(str(e), error_code="EXCEPTION")
        else:
            collection.confirm(temp_id, confirmed)
            logger.info(f"Create confirmed: {temp_id} -> {confirmed_id}")
            return ServiceResult.ok(confirmed)
        finally:
            self._release(temp_id)

    # =========================================================================
    # TOGGLE BOOLEAN FIELD
    # =========================================================================

    def toggle(
        self,
        collection: LocalCollection,
        key: Any,
        field: str,
        submit: Callable[[Any], Any],
    ) -> ServiceResult:
        """
        Set a boolean field to True locally, then confirm with submit(key).

        A field that is already True is left alone and nothing is sent.
        """
        if not self._claim(key):
            return ServiceResult.fail(
                f"An update for {key} is still in progress",
                error_code="MUTATION_PENDING",
            )

        try:
            entity = collection.get(key)
            if entity is None:
                return ServiceResult.fail(f"No entity with id {key}", error_code="NOT_FOUND")

            previous = bool(get_field(entity, field))
            if previous:
                return ServiceResult.ok(entity, metadata={"skipped": True})

            collection.set_field(key, field, True)
            try:
                submit(key)
            except ClientError as e:
                collection.set_field(key, field, previous)
                logger.warning(f"Toggle of {field} on {key} rolled back: {e.message}")
                return ServiceResult.from_exception(e)
            except Exception as e:
                collection.set_field(key, field, previous)
                logger.error(f"Toggle of {field} on {key} rolled back: {e}", exc_info=True)
                return ServiceResult.fail(str(e), error_code="EXCEPTION")
            return ServiceResult.ok(collection.get(key))
        finally:
            self._release(key)
