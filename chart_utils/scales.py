#!/usr/bin/env python
# coding: utf-8

from datetime import date, datetime, timedelta
import matplotlib.dates as mdates
import pandas as pd


def add_days(d: date, n: float) -> date:
    """Return the date n days after d (n may be negative or fractional for datetimes)."""
    return d + timedelta(days=n)


def _to_timestamp(d) -> pd.Timestamp:
    return pd.Timestamp(d)


def _like(d, ts: pd.Timestamp):
    # hand back the same kind of value the caller passed in
    if isinstance(d, pd.Timestamp):
        return ts
    if isinstance(d, datetime):
        return ts.to_pydatetime()
    return ts.date()


def month_offset(d, n: int):
    """Shift d by n calendar months, clamping the day to the target month's length."""
    return _like(d, _to_timestamp(d) + pd.DateOffset(months=n))


def month_range(start, stop) -> list:
    """First-of-month dates in [start, stop), like d3.timeMonth.range."""
    first = _to_timestamp(start)
    if first != first.normalize() or first.day != 1:
        first = (first + pd.offsets.MonthBegin(1)).normalize()
    stop_ts = _to_timestamp(stop)
    return [_like(start, ts) for ts in pd.date_range(first, stop_ts, freq="MS") if ts < stop_ts]


def months_between(start, stop) -> int:
    """Number of month boundaries crossed going from start to stop."""
    return len(month_range(start, stop))


class LinearScale:
    """Map a numeric domain linearly onto an output range."""

    def __init__(self, domain, range):
        self.domain = tuple(domain)
        self.range = tuple(range)

    def _num(self, value) -> float:
        return float(value)

    def __call__(self, value) -> float:
        d0, d1 = (self._num(v) for v in self.domain)
        r0, r1 = self.range
        if d1 == d0:
            return r0
        return r0 + (self._num(value) - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, position: float):
        d0, d1 = (self._num(v) for v in self.domain)
        r0, r1 = self.range
        if r1 == r0:
            return d0
        return d0 + (position - r0) / (r1 - r0) * (d1 - d0)


class TimeScale(LinearScale):
    """Linear scale over dates; values go through matplotlib's date numbers."""

    def _num(self, value) -> float:
        return float(mdates.date2num(value))

    def invert(self, position: float) -> datetime:
        return mdates.num2date(super().invert(position)).replace(tzinfo=None)

    def nice(self) -> "TimeScale":
        """Widen the domain outwards to whole months."""
        start, stop = self.domain
        start_ts = _to_timestamp(start).to_period("M").to_timestamp()
        stop_ts = _to_timestamp(stop)
        if stop_ts != stop_ts.to_period("M").to_timestamp():
            stop_ts = (stop_ts.to_period("M") + 1).to_timestamp()
        self.domain = (_like(start, start_ts), _like(stop, stop_ts))
        return self
