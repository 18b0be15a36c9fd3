"""Database connection, session management and the SQL storage backend."""
import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Generator, Iterable, Iterator, List, Optional

from pydantic import BaseModel
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace import models
from marketplace.storage import RECORD_TYPES, EntityKind, Storage

logger = logging.getLogger(__name__)

ORM_MODELS = {
    EntityKind.USERS: models.User,
    EntityKind.SERVICE_CATEGORIES: models.ServiceCategory,
    EntityKind.PROVIDERS: models.Provider,
    EntityKind.PRODUCTS: models.Product,
    EntityKind.CART_ITEMS: models.CartItem,
    EntityKind.ORDERS: models.Order,
    EntityKind.ORDER_ITEMS: models.OrderItem,
    EntityKind.BOOKINGS: models.Booking,
}


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine suited to the database URL.

    SQLite gets a thread-agnostic connection (and a single shared one when
    the database lives in memory); other databases get a sized pool.
    """
    if database_url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,
        pool_timeout=30,
    )


def init_db(engine: Engine) -> None:
    """Create all tables."""
    models.Base.metadata.create_all(bind=engine)


def _column_values(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in values.items()}


class DatabaseStorage(Storage):
    """Storage backed by SQLAlchemy.

    Each call runs in its own session and commits on success. Inside
    ``transaction()`` the calls made on the same thread share one session
    that is committed when the block exits, or rolled back if it raises.

    An in-memory SQLite engine has a single connection shared by every
    session (``StaticPool``). On such an engine calls and transactions are
    serialized across threads, so another thread can never commit or roll
    back work that belongs to an open transaction.
    """

    def __init__(self, engine: Engine):
        super().__init__()
        self.engine = engine
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
        )
        self._local = threading.local()
        self._shared_connection_lock = threading.RLock() if isinstance(engine.pool, StaticPool) else None

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._shared_connection_lock is None:
            yield
            return
        with self._shared_connection_lock:
            yield

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Yield the active transaction session, or a fresh one for a single call.

        Yields:
            Database session
        """
        active = getattr(self._local, "session", None)
        if active is not None:
            yield active
            return

        with self._exclusive():
            db = self.session_factory()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    @staticmethod
    def _to_record(kind: EntityKind, row: Any) -> BaseModel:
        return RECORD_TYPES[kind].model_validate(row)

    def create(self, kind: EntityKind, data: Dict[str, Any]) -> BaseModel:
        record = self.build(kind, data)
        with self.session() as db:
            db.add(ORM_MODELS[kind](**_column_values(record.model_dump())))
            db.flush()
        return record

    def get(self, kind: EntityKind, id: str) -> Optional[BaseModel]:
        with self.session() as db:
            row = db.get(ORM_MODELS[kind], id)
            return self._to_record(kind, row) if row is not None else None

    def list(self, kind: EntityKind) -> List[BaseModel]:
        with self.session() as db:
            return [self._to_record(kind, row) for row in db.query(ORM_MODELS[kind]).all()]

    def filter(self, kind: EntityKind, **criteria: Any) -> List[BaseModel]:
        with self.session() as db:
            rows = db.query(ORM_MODELS[kind]).filter_by(**_column_values(criteria)).all()
            return [self._to_record(kind, row) for row in rows]

    def count(self, kind: EntityKind) -> int:
        with self.session() as db:
            return db.query(ORM_MODELS[kind]).count()

    def update(self, kind: EntityKind, id: str, patch: Dict[str, Any]) -> Optional[BaseModel]:
        with self.session() as db:
            row = db.get(ORM_MODELS[kind], id)
            if row is None:
                return None
            for key, value in _column_values(patch).items():
                setattr(row, key, value)
            db.flush()
            return self._to_record(kind, row)

    def delete(self, kind: EntityKind, id: str) -> bool:
        with self.session() as db:
            row = db.get(ORM_MODELS[kind], id)
            if row is None:
                return False
            db.delete(row)
            db.flush()
            return True

    def load(self, kind: EntityKind, records: Iterable[BaseModel]) -> int:
        loaded = 0
        with self.session() as db:
            for record in records:
                db.merge(ORM_MODELS[kind](**_column_values(record.model_dump())))
                loaded += 1
        return loaded

    @contextmanager
    def transaction(self) -> Iterator["DatabaseStorage"]:
        if getattr(self._local, "session", None) is not None:
            yield self
            return

        with self._exclusive():
            db = self.session_factory()
            self._local.session = db
            try:
                yield self
                db.commit()
            except BaseException:
                db.rollback()
                logger.warning("Transaction rolled back")
                raise
            finally:
                self._local.session = None
                db.close()
