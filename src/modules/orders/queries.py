"""Order Query Planner.

Turns a sparse filter (status, date_from, date_to) into exactly one Order
Store query.  Planning and running are separate steps so the resolution
rules can be checked without touching the database.

Resolution, first match wins:

=========================  ==============================
filters present            query
=========================  ==============================
none                       ALL
status                     BY_STATUS
date_from + date_to        BY_DATE_RANGE
status + both dates        BY_STATUS_AND_DATE_RANGE
date_from                  PLACED_FROM
date_to                    PLACED_UNTIL
anything else              ALL
=========================  ==============================

Dates are calendar days in the active time zone: a lower bound starts at
midnight, an upper bound ends at the last instant of its day.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

import structlog
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import InvalidStatusValue

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class QueryKind(str, enum.Enum):
    ALL = "all"
    BY_STATUS = "by_status"
    BY_DATE_RANGE = "by_date_range"
    BY_STATUS_AND_DATE_RANGE = "by_status_and_date_range"
    PLACED_FROM = "placed_from"
    PLACED_UNTIL = "placed_until"


@dataclass(frozen=True)
class OrderQuery:
    kind: QueryKind
    status: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


def start_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.max))


def normalize_status(value: Optional[str]) -> Optional[str]:
    """Return ``value`` as an ``OrderStatus`` or raise ``InvalidStatusValue``."""
    if value is None:
        return None
    try:
        return OrderStatus(str(value).upper())
    except ValueError:
        raise InvalidStatusValue(
            f"Unknown order status {value!r}.", identifier=value
        ) from None


def require_status(value: Optional[str]) -> str:
    """Like ``normalize_status`` but a missing value is an error too."""
    if value is None:
        raise InvalidStatusValue("Order status is required.")
    return normalize_status(value)


class OrderQueryPlanner:
    """Resolves order history filters into store queries."""

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    def plan(
        self,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> OrderQuery:
        status = normalize_status(status)
        start = start_of_day(date_from) if date_from is not None else None
        end = end_of_day(date_to) if date_to is not None else None

        if status is None and start is None and end is None:
            return OrderQuery(QueryKind.ALL)
        if status is not None and start is None and end is None:
            return OrderQuery(QueryKind.BY_STATUS, status=status)
        if status is None and start is not None and end is not None:
            return OrderQuery(QueryKind.BY_DATE_RANGE, start=start, end=end)
        if status is not None and start is not None and end is not None:
            return OrderQuery(
                QueryKind.BY_STATUS_AND_DATE_RANGE, status=status, start=start, end=end
            )
        if status is None and start is not None:
            return OrderQuery(QueryKind.PLACED_FROM, start=start)
        if status is None and end is not None:
            return OrderQuery(QueryKind.PLACED_UNTIL, end=end)

        # status with a single date bound
        return OrderQuery(QueryKind.ALL)

    def run(self, query: OrderQuery) -> List[Order]:
        repo = self._order_repo
        runners: Dict[QueryKind, Callable[[], List[Order]]] = {
            QueryKind.ALL: repo.list_all,
            QueryKind.BY_STATUS: lambda: repo.list_by_status(query.status),
            QueryKind.BY_DATE_RANGE: lambda: repo.list_by_date_range(
                query.start, query.end
            ),
            QueryKind.BY_STATUS_AND_DATE_RANGE: lambda: (
                repo.list_by_status_and_date_range(query.status, query.start, query.end)
            ),
            QueryKind.PLACED_FROM: lambda: repo.list_placed_from(query.start),
            QueryKind.PLACED_UNTIL: lambda: repo.list_placed_until(query.end),
        }
        return runners[query.kind]()

    def list_with_filters(
        self,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Order]:
        query = self.plan(status, date_from, date_to)
        logger.info(
            "order.query_planned",
            kind=query.kind.value,
            status=status,
            date_from=None if date_from is None else date_from.isoformat(),
            date_to=None if date_to is None else date_to.isoformat(),
        )
        return self.run(query)
