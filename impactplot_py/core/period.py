"""
Pre/post intervention periods.

The caller decides where the intervention happened; this module only checks
that the split partitions the timestamps into two contiguous, non-empty
phases and derives the intervention marker from it.
"""
from dataclasses import dataclass
from typing import Sequence, Tuple

import pandas as pd

from ..errors import InvalidPeriod


def _as_index(timestamps) -> pd.DatetimeIndex:
    index = pd.DatetimeIndex(timestamps)
    if len(index) < 2:
        raise InvalidPeriod("A pre/post split needs at least two timestamps")
    if not index.is_monotonic_increasing or not index.is_unique:
        raise InvalidPeriod("Timestamps must be unique and strictly increasing")
    return index


@dataclass(frozen=True)
class TimePeriod:
    """
    Ordered timestamps split into a pre- and a post-intervention phase.

    Parameters
    ----------
    timestamps : tuple of pd.Timestamp
        Every period, in time order.
    split : int
        Position of the first post-intervention timestamp.
    """
    timestamps: Tuple[pd.Timestamp, ...]
    split: int

    def __post_init__(self):
        if not 0 < self.split < len(self.timestamps):
            raise InvalidPeriod(
                f"Split position {self.split} leaves an empty phase "
                f"({len(self.timestamps)} timestamps)"
            )

    @classmethod
    def from_post_start(cls, timestamps: Sequence, post_start) -> 'TimePeriod':
        """Split so that `post_start` is the first post-intervention timestamp."""
        index = _as_index(timestamps)
        post_start = pd.Timestamp(post_start)
        if post_start not in index:
            raise InvalidPeriod(f"Post-period start {post_start} is not one of the timestamps")
        return cls(tuple(index), int(index.get_loc(post_start)))

    @classmethod
    def from_timestamps(cls, timestamps: Sequence, pre_end) -> 'TimePeriod':
        """Split so that `pre_end` is the last pre-intervention timestamp."""
        index = _as_index(timestamps)
        pre_end = pd.Timestamp(pre_end)
        if pre_end not in index:
            raise InvalidPeriod(f"Pre-period end {pre_end} is not one of the timestamps")
        return cls(tuple(index), int(index.get_loc(pre_end)) + 1)

    @classmethod
    def from_bounds(cls, timestamps: Sequence, pre_period, post_period) -> 'TimePeriod':
        """
        Build from explicit ``[start, end]`` pairs for both phases.

        The pairs must cover the timestamps exactly: pre starts at the first
        timestamp, post ends at the last, and post starts on the entry right
        after pre ends.
        """
        index = _as_index(timestamps)
        pre_start, pre_end = (pd.Timestamp(t) for t in pre_period)
        post_start, post_end = (pd.Timestamp(t) for t in post_period)
        if pre_start != index[0] or post_end != index[-1]:
            raise InvalidPeriod("Pre and post periods must jointly cover every timestamp")
        period = cls.from_timestamps(index, pre_end)
        if period.post_start != post_start:
            raise InvalidPeriod(
                f"Post period must begin one period after {pre_end}, "
                f"i.e. at {period.post_start}, not {post_start}"
            )
        return period

    @property
    def pre_start(self) -> pd.Timestamp:
        return self.timestamps[0]

    @property
    def pre_end(self) -> pd.Timestamp:
        return self.timestamps[self.split - 1]

    @property
    def post_start(self) -> pd.Timestamp:
        return self.timestamps[self.split]

    @property
    def post_end(self) -> pd.Timestamp:
        return self.timestamps[-1]

    @property
    def pre(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(self.timestamps[:self.split])

    @property
    def post(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(self.timestamps[self.split:])

    def is_pre(self, timestamp) -> bool:
        return self.pre_start <= pd.Timestamp(timestamp) <= self.pre_end

    def is_post(self, timestamp) -> bool:
        return self.post_start <= pd.Timestamp(timestamp) <= self.post_end


@dataclass(frozen=True)
class InterventionMarker:
    """The first post-intervention timestamp, drawn as a vertical line."""
    timestamp: pd.Timestamp

    @classmethod
    def from_period(cls, period: TimePeriod) -> 'InterventionMarker':
        return cls(period.post_start)
