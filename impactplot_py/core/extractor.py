"""
Impactplot Extractor

Provides:
  - ModelResult: typed view of a fitted causal-impact model's per-period output
  - extract: normalize a ModelResult (or a DataFrame / inferences object) into a ResultTable
"""
import datetime
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd

from ..errors import (
    EmptyResult,
    MalformedTimestamp,
    MisalignedSeries,
    MissingField,
)
from .table import VALUE_COLUMNS, ResultTable, interval_violations, warn_violations

logger = logging.getLogger(__name__)

# Column names used by the Python causal-impact ports for their `inferences` frame.
INFERENCE_COLUMNS: Dict[str, str] = {
    'observed': 'response',
    'predicted': 'point_pred',
    'predicted_lower': 'point_pred_lower',
    'predicted_upper': 'point_pred_upper',
    'pointwise_effect': 'point_effect',
    'pointwise_effect_lower': 'point_effect_lower',
    'pointwise_effect_upper': 'point_effect_upper',
    'cumulative_effect': 'cum_effect',
    'cumulative_effect_lower': 'cum_effect_lower',
    'cumulative_effect_upper': 'cum_effect_upper',
}


@dataclass(frozen=True, eq=False)
class ModelResult:
    """
    Per-period output of a fitted causal-impact model.

    `index` is either native timestamps or labels (strings, ordinal row ids)
    that `extract` parses. Every value series must have one entry per index
    entry.
    """
    index: Any
    observed: np.ndarray
    predicted: np.ndarray
    predicted_lower: np.ndarray
    predicted_upper: np.ndarray
    pointwise_effect: np.ndarray
    pointwise_effect_lower: np.ndarray
    pointwise_effect_upper: np.ndarray
    cumulative_effect: np.ndarray
    cumulative_effect_lower: np.ndarray
    cumulative_effect_upper: np.ndarray

    def __post_init__(self):
        n = len(self.index)
        for f in fields(self):
            if f.name == 'index':
                continue
            values = getattr(self, f.name)
            if values is None:
                raise MissingField(f.name)
            if len(values) != n:
                raise MisalignedSeries(f.name, n, len(values))

    def __len__(self) -> int:
        return len(self.index)

    @classmethod
    def from_mapping(cls, index, series: Mapping[str, Any]) -> 'ModelResult':
        """Build from a mapping holding every name in ``VALUE_COLUMNS``."""
        values = {}
        for name in VALUE_COLUMNS:
            if series.get(name) is None:
                raise MissingField(name)
            values[name] = np.asarray(series[name], dtype=np.float64)
        return cls(index=index, **values)

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        columns: Optional[Mapping[str, str]] = None,
        time_column: Optional[str] = None,
    ) -> 'ModelResult':
        """
        Build from a DataFrame.

        Parameters
        ----------
        frame : pd.DataFrame
            One row per period.
        columns : dict, optional
            Maps canonical series names to the frame's column names. Names
            not listed are looked up verbatim.
        time_column : str, optional
            Column holding the time index. Defaults to the frame's index.
        """
        columns = dict(columns or {})
        series = {}
        for name in VALUE_COLUMNS:
            source = columns.get(name, name)
            if source not in frame.columns:
                raise MissingField(name)
            series[name] = frame[source].to_numpy()

        if time_column is None:
            index = frame.index
        elif time_column in frame.columns:
            index = frame[time_column].to_numpy()
        else:
            raise MissingField(time_column)
        return cls.from_mapping(index, series)

    @classmethod
    def from_inferences(cls, result) -> 'ModelResult':
        """
        Build from a causal-impact result exposing an ``inferences`` DataFrame
        (``response``, ``point_pred``, ``cum_effect`` ... naming), or from such
        a DataFrame directly.
        """
        frame = result if isinstance(result, pd.DataFrame) else getattr(result, 'inferences', None)
        if frame is None:
            raise MissingField('inferences')
        return cls.from_frame(frame, columns=INFERENCE_COLUMNS)


def _coerce(model_result) -> ModelResult:
    if isinstance(model_result, ModelResult):
        return model_result
    if isinstance(model_result, pd.DataFrame):
        columns = set(model_result.columns)
        inference_names = columns & set(INFERENCE_COLUMNS.values())
        if len(inference_names) > len(columns & set(VALUE_COLUMNS)):
            return ModelResult.from_inferences(model_result)
        return ModelResult.from_frame(model_result)
    if hasattr(model_result, 'inferences'):
        return ModelResult.from_inferences(model_result)
    raise TypeError(
        f"Cannot extract from {type(model_result).__name__}; expected a ModelResult, "
        "a DataFrame, or an object with an 'inferences' DataFrame"
    )


def _parse_label(label, time_format: Optional[str]) -> pd.Timestamp:
    if isinstance(label, (pd.Timestamp, datetime.datetime, datetime.date, np.datetime64)):
        ts = pd.Timestamp(label)
    elif time_format is None and not isinstance(label, str):
        # Bare ordinals would silently become epoch offsets.
        raise MalformedTimestamp(label, None, "non-text label needs a declared time_format")
    else:
        try:
            ts = pd.to_datetime(str(label), format=time_format)
        except (ValueError, TypeError, OverflowError) as e:
            raise MalformedTimestamp(label, time_format, str(e)) from e
    if pd.isna(ts):
        raise MalformedTimestamp(label, time_format, "parses to a missing timestamp")
    return ts


def parse_time_index(index, time_format: Optional[str] = None) -> pd.DatetimeIndex:
    """
    Turn a time index into a strictly increasing DatetimeIndex.

    Native timestamps are kept as-is; any other label is parsed with
    `time_format` (strftime syntax). Raises MalformedTimestamp naming the
    first label that cannot be parsed or that does not come after its
    predecessor.
    """
    if isinstance(index, pd.DatetimeIndex) and time_format is None:
        if not index.hasnans and index.is_monotonic_increasing and index.is_unique:
            return pd.DatetimeIndex(index)

    labels = list(index)
    parsed = []
    previous = None
    for label in labels:
        ts = _parse_label(label, time_format)
        if previous is not None and ts <= previous:
            raise MalformedTimestamp(
                label, time_format, f"not after the preceding timestamp {previous}"
            )
        parsed.append(ts)
        previous = ts
    return pd.DatetimeIndex(parsed)


def extract(model_result, time_format: Optional[str] = None) -> ResultTable:
    """
    Normalize a fitted model's per-period output into a ResultTable.

    Parameters
    ----------
    model_result : ModelResult, pd.DataFrame or inferences-style object
        The model output. Non-ModelResult inputs are validated through
        ``ModelResult.from_frame`` / ``ModelResult.from_inferences``.
    time_format : str, optional
        strftime format of the time-index labels when they are not native
        timestamps.

    Returns
    -------
    ResultTable
        One row per input period, in the original order, with values copied
        verbatim.
    """
    result = _coerce(model_result)
    if len(result) == 0:
        raise EmptyResult()

    timestamps = parse_time_index(result.index, time_format)
    table = ResultTable(timestamps, {name: getattr(result, name) for name in VALUE_COLUMNS})

    warn_violations(interval_violations(table))

    logger.debug(
        "Extracted %d periods from %s to %s", len(table), timestamps[0], timestamps[-1]
    )
    return table
