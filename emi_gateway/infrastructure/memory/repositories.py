"""In-process calculation store for tests and local development"""

from datetime import datetime, timezone
from threading import Lock
from typing import List

from emi_gateway.domain.models import CalculationEntry, StoredCalculation


class InMemoryCalculationRepository:
    """
    Append-only list of calculations.

    Ids are sequential ("inmem-1", "inmem-2", ...). A client request id is
    stored but not used for deduplication: every save creates a record.
    """

    def __init__(self):
        self._records: List[StoredCalculation] = []
        self._lock = Lock()

    def save(self, entry: CalculationEntry) -> str:
        result = entry.result
        now = datetime.now(timezone.utc)

        with self._lock:
            record_id = f"inmem-{len(self._records) + 1}"
            self._records.append(
                StoredCalculation(
                    id=record_id,
                    principal=result.principal,
                    monthly_rate=result.monthly_rate,
                    months=result.months,
                    monthly_payment=result.monthly_payment,
                    formatted_monthly_payment=result.formatted_monthly_payment,
                    currency=result.currency,
                    version=entry.version,
                    user_id=entry.user_id,
                    client_request_id=entry.client_request_id,
                    created_at=now,
                    updated_at=now,
                )
            )

        return record_id

    @property
    def records(self) -> List[StoredCalculation]:
        with self._lock:
            return list(self._records)

    def reset(self) -> None:
        """Clear all records (test isolation)"""
        with self._lock:
            self._records.clear()
