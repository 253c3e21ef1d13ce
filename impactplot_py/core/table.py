"""
Result table: one row per period of a causal-impact model result.
"""
import warnings
from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

import numpy as np
import pandas as pd

from ..errors import IntervalOrderWarning
from .period import TimePeriod

OBSERVED = 'observed'
PREDICTED = ('predicted', 'predicted_lower', 'predicted_upper')
POINTWISE = ('pointwise_effect', 'pointwise_effect_lower', 'pointwise_effect_upper')
CUMULATIVE = ('cumulative_effect', 'cumulative_effect_lower', 'cumulative_effect_upper')

VALUE_COLUMNS: Tuple[str, ...] = (OBSERVED,) + PREDICTED + POINTWISE + CUMULATIVE
TIME_COLUMN = 'timestamp'


@dataclass(frozen=True)
class ResultRow:
    """A single period of model output."""
    timestamp: pd.Timestamp
    observed: float
    predicted: float
    predicted_lower: float
    predicted_upper: float
    pointwise_effect: float
    pointwise_effect_lower: float
    pointwise_effect_upper: float
    cumulative_effect: float
    cumulative_effect_lower: float
    cumulative_effect_upper: float


class ResultTable:
    """
    Immutable, time-indexed table of model output.

    Values are held as read-only numpy arrays; ``frame`` hands out a fresh
    DataFrame so callers can never write through to the table.

    Parameters
    ----------
    timestamps : pd.DatetimeIndex
        Strictly increasing period identities.
    columns : dict of str -> array-like
        One array per name in ``VALUE_COLUMNS``, aligned with ``timestamps``.
    """

    def __init__(self, timestamps: pd.DatetimeIndex, columns: Dict[str, np.ndarray]):
        self._index = pd.DatetimeIndex(timestamps, name=TIME_COLUMN)
        self._columns = {}
        for name in VALUE_COLUMNS:
            values = np.array(columns[name], dtype=np.float64, copy=True)
            values.flags.writeable = False
            self._columns[name] = values

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[ResultRow]:
        return iter(self.rows())

    def __repr__(self) -> str:
        if len(self) == 0:
            return "ResultTable(rows=0)"
        return (
            f"ResultTable(rows={len(self)}, "
            f"start={self._index[0].date()}, end={self._index[-1].date()})"
        )

    @property
    def timestamps(self) -> pd.DatetimeIndex:
        return self._index

    @property
    def frame(self) -> pd.DataFrame:
        """Copy of the table as a DataFrame indexed by timestamp."""
        return pd.DataFrame(
            {name: self._columns[name].copy() for name in VALUE_COLUMNS},
            index=self._index.copy(),
        )

    def column(self, name: str) -> np.ndarray:
        """Read-only values of one column."""
        if name not in self._columns:
            raise KeyError(f"Unknown column '{name}'; expected one of {VALUE_COLUMNS}")
        return self._columns[name]

    def rows(self) -> List[ResultRow]:
        return [
            ResultRow(ts, *(float(self._columns[name][i]) for name in VALUE_COLUMNS))
            for i, ts in enumerate(self._index)
        ]

    def split(self, period: TimePeriod) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Return the (pre, post) slices of the table for a given period."""
        df = self.frame
        return df.loc[period.pre_start:period.pre_end], df.loc[period.post_start:period.post_end]

    def summary(self, period: TimePeriod) -> pd.DataFrame:
        """
        Post-period effect summary.

        The "Average" row averages each series over the post period; the
        "Cumulative" row sums observed and predicted values and reports the
        final cumulative effect with its bounds.
        """
        _, post = self.split(period)
        avg_pred = post['predicted'].mean()
        sum_pred = post['predicted'].sum()
        last = post.iloc[-1]

        average = {
            'Actual': post[OBSERVED].mean(),
            'Predicted': avg_pred,
            'Predicted Lower': post['predicted_lower'].mean(),
            'Predicted Upper': post['predicted_upper'].mean(),
            'Abs Effect': post['pointwise_effect'].mean(),
            'Abs Effect Lower': post['pointwise_effect_lower'].mean(),
            'Abs Effect Upper': post['pointwise_effect_upper'].mean(),
        }
        cumulative = {
            'Actual': post[OBSERVED].sum(),
            'Predicted': sum_pred,
            'Predicted Lower': post['predicted_lower'].sum(),
            'Predicted Upper': post['predicted_upper'].sum(),
            'Abs Effect': last['cumulative_effect'],
            'Abs Effect Lower': last['cumulative_effect_lower'],
            'Abs Effect Upper': last['cumulative_effect_upper'],
        }
        average['Rel Effect'] = average['Abs Effect'] / avg_pred if avg_pred else np.nan
        cumulative['Rel Effect'] = cumulative['Abs Effect'] / sum_pred if sum_pred else np.nan

        return pd.DataFrame([average, cumulative], index=['Average', 'Cumulative'])


def interval_violations(table: ResultTable, post_start=None, atol: float = 1e-9) -> List[str]:
    """
    Describe rows that break the ordering or effect-identity invariants.

    With `post_start` the cumulative series are also checked: all three are
    zero before it, and the cumulative effect is the running sum of the
    pointwise effect from it onward. Cumulative bounds are only checked for
    being zero in the pre period, since models may derive them independently.

    Returns an empty list for well-formed model output.
    """
    problems = []
    for point, lower, upper in (PREDICTED, POINTWISE, CUMULATIVE):
        lo, mid, hi = table.column(lower), table.column(point), table.column(upper)
        bad = np.flatnonzero((lo > mid + atol) | (mid > hi + atol))
        if bad.size:
            problems.append(
                f"{lower} <= {point} <= {upper} fails at {bad.size} rows "
                f"(first: {table.timestamps[bad[0]]})"
            )

    effect = table.column(OBSERVED) - table.column('predicted')
    bad = np.flatnonzero(
        ~np.isclose(effect, table.column('pointwise_effect'), atol=atol, equal_nan=True)
    )
    if bad.size:
        problems.append(
            f"pointwise_effect != observed - predicted at {bad.size} rows "
            f"(first: {table.timestamps[bad[0]]})"
        )

    if post_start is not None:
        problems.extend(cumulative_violations(table, post_start, atol))
    return problems


def cumulative_violations(table: ResultTable, post_start, atol: float = 1e-9) -> List[str]:
    """Check the cumulative series against a post-period start."""
    post_start = pd.Timestamp(post_start)
    problems = []
    pre = table.timestamps < post_start
    for name in CUMULATIVE:
        values = table.column(name)[pre]
        bad = np.flatnonzero(np.abs(values) > atol)
        if bad.size:
            problems.append(
                f"{name} is not zero before {post_start.date()} at {bad.size} rows "
                f"(first: {table.timestamps[bad[0]]})"
            )

    post = ~pre
    running = np.cumsum(table.column('pointwise_effect')[post])
    bad = np.flatnonzero(
        ~np.isclose(table.column('cumulative_effect')[post], running, atol=atol, equal_nan=True)
    )
    if bad.size:
        problems.append(
            f"cumulative_effect is not the running sum of pointwise_effect from "
            f"{post_start.date()} at {bad.size} rows "
            f"(first: {table.timestamps[post][bad[0]]})"
        )
    return problems


def warn_violations(problems: List[str], stacklevel: int = 3) -> List[str]:
    """Emit an IntervalOrderWarning per message and return the messages."""
    for problem in problems:
        warnings.warn(problem, IntervalOrderWarning, stacklevel=stacklevel)
    return problems
