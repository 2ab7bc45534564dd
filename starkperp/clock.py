"""Clock adjusted for skew between the local machine and the exchange."""

import logging
from datetime import datetime, timedelta, timezone

from starkperp.types import ISO8601

log = logging.getLogger(__name__)


class Clock:
    """Source of request timestamps.

    The adjustment is the number of seconds to add to local time to match the
    server's time. Callers are expected to compute it from the server's time
    endpoint; this class performs no I/O.
    """

    _timestamp_adjustment: float

    def __init__(self, timestamp_adjustment: float = 0.0):
        """Initialize the clock.

        Args:
            timestamp_adjustment: Seconds to add to local time (default: 0)

        """
        self._timestamp_adjustment = float(timestamp_adjustment)

    @property
    def timestamp_adjustment(self) -> float:
        """Seconds added to local time."""
        return self._timestamp_adjustment

    def set_timestamp_adjustment(self, adjustment: float) -> None:
        """Replace the skew adjustment.

        Args:
            adjustment: Seconds to add to local time

        """
        log.debug("Clock adjustment set to %.3fs", adjustment)
        self._timestamp_adjustment = float(adjustment)

    def now(self) -> datetime:
        """Return the adjusted current time in UTC."""
        return datetime.now(timezone.utc) + timedelta(
            seconds=self._timestamp_adjustment
        )

    def get_adjusted_iso_string(self) -> ISO8601:
        """Return the adjusted time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
        return format_iso_timestamp(self.now())


def format_iso_timestamp(moment: datetime) -> ISO8601:
    """Format an aware datetime in UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
