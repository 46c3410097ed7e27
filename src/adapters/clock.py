from datetime import UTC, datetime, timedelta


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)

    def seconds_since(self, utc_dt: datetime) -> float:
        return (self.now_utc() - utc_dt).total_seconds()


class FixedClock:
    """Clock pinned to a given instant; advanced explicitly."""

    def __init__(self, start: datetime) -> None:
        self._now = start

    def now_utc(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        self._now = self._now + timedelta(seconds=seconds)
        return self._now
