"""Per-client daily quota gate."""

from datetime import date, datetime, timezone
from typing import Callable, Optional

from config import ApplicationConfig
from models import QuotaDecision, QuotaRecord, QuotaResult
from utils import get_logger
from .quota_store import InMemoryQuotaStore, QuotaStore


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class QuotaGate:
    """Enforces a fixed number of generations per client per UTC day."""

    def __init__(
        self,
        config: ApplicationConfig,
        store: Optional[QuotaStore] = None,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self.config = config
        self.store: QuotaStore = store if store is not None else InMemoryQuotaStore()
        self.clock = clock
        self.logger = get_logger(__name__, service="quota_gate")

    @property
    def enabled(self) -> bool:
        return self.config.quota_enabled

    def check_and_consume(self, client_key: str, daily_max: Optional[int] = None) -> QuotaResult:
        """Allow and count a request, or reject it once today's cap is reached.

        Must stay synchronous: the lookup and the update form one atomic step
        on the event loop.
        """
        limit = self.config.max_daily_generations if daily_max is None else daily_max
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"daily_max must be a positive integer, got {limit!r}")

        if not self.enabled:
            return QuotaResult(
                decision=QuotaDecision.ALLOWED, client_key=client_key, count=0, limit=limit
            )

        today = self.clock().isoformat()
        record = self.store.get(client_key)

        if record is None or record.date_stamp != today:
            record = QuotaRecord(client_key=client_key, date_stamp=today, count=1)
            self.store.put(record)
            return QuotaResult(
                decision=QuotaDecision.ALLOWED, client_key=client_key, count=1, limit=limit
            )

        if record.count >= limit:
            self.logger.info(
                "Daily quota exhausted",
                client_key=client_key,
                count=record.count,
                limit=limit,
            )
            return QuotaResult(
                decision=QuotaDecision.REJECTED,
                client_key=client_key,
                count=record.count,
                limit=limit,
            )

        record = record.model_copy(update={"count": record.count + 1})
        self.store.put(record)
        return QuotaResult(
            decision=QuotaDecision.ALLOWED, client_key=client_key, count=record.count, limit=limit
        )
