"""Data access layer for persisted calculations"""

from typing import Any, Dict

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from emi_gateway.domain.exceptions import PersistenceError
from emi_gateway.domain.models import CalculationEntry
from emi_gateway.infrastructure.database.models import CalculationRecord
from emi_gateway.infrastructure.database.session import StoreHandle

# Dialects whose INSERT supports ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _row_values(entry: CalculationEntry) -> Dict[str, Any]:
    result = entry.result
    return {
        "principal": result.principal,
        "monthly_rate": result.monthly_rate,
        "months": result.months,
        "monthly_payment": result.monthly_payment,
        "formatted_monthly_payment": result.formatted_monthly_payment,
        "currency": result.currency,
        "version": entry.version,
        "user_id": entry.user_id,
        "client_request_id": entry.client_request_id,
    }


class SqlCalculationRepository:
    """Repository for calculations in the durable store"""

    def __init__(self, handle: StoreHandle):
        self.handle = handle

    def save(self, entry: CalculationEntry) -> str:
        """
        Persist a calculation and return its id.

        With a client request id the write is a single merge-upsert keyed by
        that id: a repeat overwrites the row, keeps its created_at and keeps
        a stored user_id when the repeat omits one. Without
        one a new row is inserted under a generated id.

        Raises:
            PersistenceError: Store unreachable, misconfigured or write rejected
        """
        values = _row_values(entry)
        session_factory = self.handle.session_factory

        try:
            with session_factory() as session, session.begin():
                if entry.client_request_id:
                    return self._upsert(session, entry.client_request_id, values)

                record = CalculationRecord(**values)
                session.add(record)
                session.flush()  # Assigns the generated id
                return record.id

        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save calculation: {e}") from e

    def _upsert(self, session: Session, record_id: str, values: Dict[str, Any]) -> str:
        dialect = session.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise PersistenceError(f"Idempotent writes are not supported on {dialect}")

        table = CalculationRecord.__table__
        statement = insert(table).values(id=record_id, **values)
        # Optional fields left out of a repeat write keep their stored value
        merged = {key: value for key, value in values.items() if value is not None}
        statement = statement.on_conflict_do_update(
            index_elements=[table.c.id],
            set_={**merged, "updated_at": func.now()},
        )
        session.execute(statement)
        return record_id

    def get(self, record_id: str) -> CalculationRecord | None:
        """Fetch one calculation by id"""
        with self.handle.session_factory() as session:
            record = session.get(CalculationRecord, record_id)
            if record is not None:
                session.expunge(record)
            return record
