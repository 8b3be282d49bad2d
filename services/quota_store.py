"""Storage backends for daily quota records."""

from typing import Dict, Optional, Protocol

from models import QuotaRecord


class QuotaStore(Protocol):
    """Synchronous key/value store for quota records.

    Implementations must not suspend inside get/put; the gate relies on the
    read and write of one record happening within a single event-loop step.
    """

    def get(self, client_key: str) -> Optional[QuotaRecord]:
        ...

    def put(self, record: QuotaRecord) -> None:
        ...

    def __len__(self) -> int:
        ...


class InMemoryQuotaStore:
    """Process-local quota store. Contents are lost on restart."""

    def __init__(self) -> None:
        self._records: Dict[str, QuotaRecord] = {}

    def get(self, client_key: str) -> Optional[QuotaRecord]:
        return self._records.get(client_key)

    def put(self, record: QuotaRecord) -> None:
        self._records[record.client_key] = record

    def __len__(self) -> int:
        return len(self._records)
