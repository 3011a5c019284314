"""Per-entity record stores.

Every entity type (users, properties, units, tenants, payments,
notifications) lives in its own ``EntityStore``. A store hands out integer ids
from a counter that starts at 1 and only ever moves forward, stamps
``created_at`` on insert, and merges updates shallowly: a provided field
replaces the old value outright.

Two backends share those semantics:

* ``MemoryEntityStore`` keeps rows in a dict for the lifetime of the process.
* ``SqlEntityStore`` maps rows onto SQLAlchemy models through a session factory.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..core.clock import Clock, utcnow

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

SERVER_FIELDS = ("id", "created_at")


class StoreBackend(str, Enum):
    MEMORY = "memory"
    DATABASE = "database"


def _client_fields(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if key not in SERVER_FIELDS}


class EntityStore(ABC, Generic[RecordT]):
    def __init__(self, record_type: Type[RecordT], clock: Clock = utcnow) -> None:
        self.record_type = record_type
        self.clock = clock

    @property
    def entity_name(self) -> str:
        return self.record_type.__name__

    @abstractmethod
    def insert(self, values: Mapping[str, Any]) -> RecordT:
        ...

    @abstractmethod
    def get(self, entity_id: int) -> Optional[RecordT]:
        ...

    @abstractmethod
    def update(self, entity_id: int, changes: Mapping[str, Any]) -> Optional[RecordT]:
        ...

    @abstractmethod
    def delete(self, entity_id: int) -> bool:
        ...

    @abstractmethod
    def all(self) -> List[RecordT]:
        """Every row, oldest id first."""

    def find(self, **criteria: Any) -> List[RecordT]:
        return [
            record
            for record in self.all()
            if all(getattr(record, field) == value for field, value in criteria.items())
        ]

    def first(self, **criteria: Any) -> Optional[RecordT]:
        matches = self.find(**criteria)
        return matches[0] if matches else None

    def filter(self, predicate: Callable[[RecordT], bool]) -> List[RecordT]:
        return [record for record in self.all() if predicate(record)]


class MemoryEntityStore(EntityStore[RecordT]):
    def __init__(self, record_type: Type[RecordT], clock: Clock = utcnow) -> None:
        super().__init__(record_type, clock)
        self._rows: Dict[int, RecordT] = {}
        self._next_id = 1

    def insert(self, values: Mapping[str, Any]) -> RecordT:
        payload = _client_fields(values)
        payload.update(id=self._next_id, created_at=self.clock())
        record = self.record_type.model_validate(payload)
        self._next_id += 1
        self._rows[record.id] = record
        logger.debug("Inserted %s id=%s", self.entity_name, record.id)
        return record

    def get(self, entity_id: int) -> Optional[RecordT]:
        return self._rows.get(entity_id)

    def update(self, entity_id: int, changes: Mapping[str, Any]) -> Optional[RecordT]:
        current = self._rows.get(entity_id)
        if current is None:
            return None
        merged = current.model_dump()
        merged.update(_client_fields(changes))
        record = self.record_type.model_validate(merged)
        self._rows[entity_id] = record
        return record

    def delete(self, entity_id: int) -> bool:
        removed = self._rows.pop(entity_id, None)
        if removed is not None:
            logger.debug("Deleted %s id=%s", self.entity_name, entity_id)
        return removed is not None

    def all(self) -> List[RecordT]:
        return list(self._rows.values())


class SqlEntityStore(EntityStore[RecordT]):
    """Entity store over one SQLAlchemy model; every call runs in its own session."""

    def __init__(
        self,
        record_type: Type[RecordT],
        model: Any,
        session_factory: Callable[[], Session],
        clock: Clock = utcnow,
    ) -> None:
        super().__init__(record_type, clock)
        self.model = model
        self.session_factory = session_factory

    def _to_record(self, row: Any) -> RecordT:
        return self.record_type.model_validate(row)

    def insert(self, values: Mapping[str, Any]) -> RecordT:
        payload = _client_fields(values)
        with self.session_factory() as session:
            row = self.model(**payload, created_at=self.clock())
            session.add(row)
            session.commit()
            session.refresh(row)
            record = self._to_record(row)
        logger.debug("Inserted %s id=%s", self.entity_name, record.id)
        return record

    def get(self, entity_id: int) -> Optional[RecordT]:
        with self.session_factory() as session:
            row = session.get(self.model, entity_id)
            return self._to_record(row) if row is not None else None

    def update(self, entity_id: int, changes: Mapping[str, Any]) -> Optional[RecordT]:
        with self.session_factory() as session:
            row = session.get(self.model, entity_id)
            if row is None:
                return None
            fields = _client_fields(changes)
            # The merged record must validate before anything is written.
            self.record_type.model_validate({**self._to_record(row).model_dump(), **fields})
            for field, value in fields.items():
                setattr(row, field, value)
            session.commit()
            session.refresh(row)
            return self._to_record(row)

    def delete(self, entity_id: int) -> bool:
        with self.session_factory() as session:
            row = session.get(self.model, entity_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
        logger.debug("Deleted %s id=%s", self.entity_name, entity_id)
        return True

    def all(self) -> List[RecordT]:
        with self.session_factory() as session:
            rows = session.query(self.model).order_by(self.model.id.asc()).all()
            return [self._to_record(row) for row in rows]

    def find(self, **criteria: Any) -> List[RecordT]:
        with self.session_factory() as session:
            rows = (
                session.query(self.model)
                .filter_by(**criteria)
                .order_by(self.model.id.asc())
                .all()
            )
            return [self._to_record(row) for row in rows]
