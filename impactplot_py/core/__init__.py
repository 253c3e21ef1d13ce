from .extractor import INFERENCE_COLUMNS, ModelResult, extract, parse_time_index
from .period import InterventionMarker, TimePeriod
from .table import (
    VALUE_COLUMNS,
    ResultRow,
    ResultTable,
    cumulative_violations,
    interval_violations,
    warn_violations,
)

__all__ = [
    'ModelResult', 'extract', 'parse_time_index', 'INFERENCE_COLUMNS',
    'TimePeriod', 'InterventionMarker',
    'ResultRow', 'ResultTable', 'VALUE_COLUMNS', 'interval_violations',
    'cumulative_violations', 'warn_violations',
]
