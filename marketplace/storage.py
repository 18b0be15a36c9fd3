"""Entity storage contract and the in-memory implementation."""
import logging
import threading
import uuid
import weakref
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Type

from pydantic import BaseModel

from marketplace import schemas

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    """Collections held by the store."""
    USERS = "users"
    SERVICE_CATEGORIES = "service_categories"
    PROVIDERS = "providers"
    PRODUCTS = "products"
    CART_ITEMS = "cart_items"
    ORDERS = "orders"
    ORDER_ITEMS = "order_items"
    BOOKINGS = "bookings"


RECORD_TYPES: Dict[EntityKind, Type[BaseModel]] = {
    EntityKind.USERS: schemas.User,
    EntityKind.SERVICE_CATEGORIES: schemas.ServiceCategory,
    EntityKind.PROVIDERS: schemas.Provider,
    EntityKind.PRODUCTS: schemas.Product,
    EntityKind.CART_ITEMS: schemas.CartItem,
    EntityKind.ORDERS: schemas.Order,
    EntityKind.ORDER_ITEMS: schemas.OrderItem,
    EntityKind.BOOKINGS: schemas.Booking,
}


def new_id() -> str:
    """Generate an opaque, globally unique identifier."""
    return str(uuid.uuid4())


class UserLocks:
    """Registry of per-user re-entrant locks.

    Entries are weak: a user's lock lives only while some caller holds a
    reference to it, so the registry does not grow with every user seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    def __call__(self, user_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
            return lock


class Storage(ABC):
    """Keyed storage for every entity kind.

    Getters return ``None`` for unknown ids instead of raising; callers
    decide whether absence is an error.
    """

    def __init__(self):
        self.user_lock = UserLocks()

    def build(self, kind: EntityKind, data: Dict[str, Any]) -> BaseModel:
        """Validate ``data`` as a record of ``kind`` with a fresh id."""
        return RECORD_TYPES[kind].model_validate({**data, "id": new_id()})

    @abstractmethod
    def create(self, kind: EntityKind, data: Dict[str, Any]) -> BaseModel:
        """Assign a new id to ``data``, store it and return the full record."""

    @abstractmethod
    def get(self, kind: EntityKind, id: str) -> Optional[BaseModel]:
        """Return the record or None."""

    @abstractmethod
    def list(self, kind: EntityKind) -> List[BaseModel]:
        """Return every record of ``kind``; order is not guaranteed."""

    @abstractmethod
    def update(self, kind: EntityKind, id: str, patch: Dict[str, Any]) -> Optional[BaseModel]:
        """Apply ``patch`` to an existing record; None if the id is unknown."""

    @abstractmethod
    def delete(self, kind: EntityKind, id: str) -> bool:
        """Remove a record; False if it was not there."""

    @abstractmethod
    def load(self, kind: EntityKind, records: Iterable[BaseModel]) -> int:
        """Insert records that already carry ids (seeding)."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator["Storage"]:
        """Unit of work: every write inside the block lands, or none does."""

    def count(self, kind: EntityKind) -> int:
        return len(self.list(kind))

    def filter(self, kind: EntityKind, **criteria: Any) -> List[BaseModel]:
        """Records whose attributes equal every given criterion."""
        return [
            record for record in self.list(kind)
            if all(getattr(record, key) == value for key, value in criteria.items())
        ]


class MemoryStorage(Storage):
    """Volatile store backed by one dict per entity kind.

    All access goes through a single re-entrant lock. Updates swap in a
    modified copy of the record, so readers only ever see whole records.
    """

    def __init__(self):
        super().__init__()
        self._lock = threading.RLock()
        self._collections: Dict[EntityKind, Dict[str, BaseModel]] = {
            kind: {} for kind in EntityKind
        }

    def create(self, kind: EntityKind, data: Dict[str, Any]) -> BaseModel:
        record = self.build(kind, data)
        with self._lock:
            self._collections[kind][record.id] = record
        logger.debug("Created record", extra={"kind": kind.value, "record_id": record.id})
        return record

    def get(self, kind: EntityKind, id: str) -> Optional[BaseModel]:
        with self._lock:
            return self._collections[kind].get(id)

    def list(self, kind: EntityKind) -> List[BaseModel]:
        with self._lock:
            return list(self._collections[kind].values())

    def update(self, kind: EntityKind, id: str, patch: Dict[str, Any]) -> Optional[BaseModel]:
        with self._lock:
            record = self._collections[kind].get(id)
            if record is None:
                return None
            updated = record.model_copy(update=patch)
            self._collections[kind][id] = updated
            return updated

    def delete(self, kind: EntityKind, id: str) -> bool:
        with self._lock:
            return self._collections[kind].pop(id, None) is not None

    def load(self, kind: EntityKind, records: Iterable[BaseModel]) -> int:
        loaded = 0
        with self._lock:
            for record in records:
                # stores never share record objects with callers or each other
                self._collections[kind][record.id] = record.model_copy(deep=True)
                loaded += 1
        return loaded

    @contextmanager
    def transaction(self) -> Iterator["MemoryStorage"]:
        with self._lock:
            snapshot = {kind: dict(records) for kind, records in self._collections.items()}
            try:
                yield self
            except BaseException:
                self._collections = snapshot
                logger.warning("Transaction rolled back")
                raise
