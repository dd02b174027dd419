"""
Base class for engine services.

Provides the injected record store, a clock, logging, and the argument
checks every service shares.
"""

from datetime import date, datetime
from typing import Callable, Optional

from staffplan.domain import Activity, DateWindow
from staffplan.errors import InvalidInputError, NotFoundError
from staffplan.platform.logging import get_logger
from staffplan.storage.base import RecordStore


class EngineServiceBase:
    """
    Base class for all engine services.

    Provides:
    - Record store access (injected, never a global handle)
    - An injectable clock for "today"
    - Common argument validation
    - Logging
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize the service.

        Args:
            store: Record store answering the read queries
            clock: Callable returning today's date; defaults to date.today
        """
        if store is None:
            raise RuntimeError("Record store not configured")
        self.store = store
        self.clock = clock or date.today
        self.logger = get_logger(self.__class__.__name__)

    def today(self) -> date:
        """Current date according to the injected clock."""
        return _as_date(self.clock())

    def require_window(self, start_date, end_date) -> DateWindow:
        """
        Validate a bounded date range.

        Raises:
            InvalidInputError: a bound is missing, not a date, or end precedes start
        """
        if start_date is None or end_date is None:
            raise InvalidInputError("start_date and end_date are required")
        if not isinstance(start_date, date) or not isinstance(end_date, date):
            raise InvalidInputError("start_date and end_date must be dates")
        start, end = _as_date(start_date), _as_date(end_date)
        if end < start:
            raise InvalidInputError(
                f"end_date {end.isoformat()} is before start_date {start.isoformat()}"
            )
        return DateWindow(start, end)

    def optional_window(self, start_date=None, end_date=None) -> DateWindow:
        """
        Validate a date range where either bound may be missing.

        Raises:
            InvalidInputError: a bound is not a date, or end precedes start
        """
        if start_date is not None and end_date is not None:
            return self.require_window(start_date, end_date)
        for bound in (start_date, end_date):
            if bound is not None and not isinstance(bound, date):
                raise InvalidInputError("start_date and end_date must be dates")
        return DateWindow(
            _as_date(start_date) if start_date is not None else None,
            _as_date(end_date) if end_date is not None else None,
        )

    def require_activity(self, activity_id: str) -> Activity:
        """Fetch an activity or raise NotFoundError."""
        activity = self.store.find_activity_by_id(activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        return activity


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
