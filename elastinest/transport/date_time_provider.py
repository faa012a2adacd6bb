"""Clock used by pools and pipelines; replaceable in tests."""

from datetime import UTC, datetime, timedelta

DEFAULT_DEAD_TIMEOUT = timedelta(minutes=1)
DEFAULT_MAX_DEAD_TIMEOUT = timedelta(minutes=30)


class DateTimeProvider:
    def now(self) -> datetime:
        return datetime.now(UTC)

    def dead_time(
        self,
        attempts: int,
        dead_timeout: timedelta | None = None,
        max_dead_timeout: timedelta | None = None,
    ) -> datetime:
        """
        Point in time until which a node that failed `attempts` times before
        stays out of rotation.

        The back-off grows by a factor of sqrt(2) per failed attempt, starting
        at dead_timeout and capped at max_dead_timeout.
        """
        timeout = dead_timeout or DEFAULT_DEAD_TIMEOUT
        max_timeout = max_dead_timeout or DEFAULT_MAX_DEAD_TIMEOUT
        milliseconds = min(
            timeout.total_seconds() * 1000 * 2 * 2 ** (attempts * 0.5 - 1),
            max_timeout.total_seconds() * 1000,
        )
        return self.now() + timedelta(milliseconds=milliseconds)
