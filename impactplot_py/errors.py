"""
Impactplot Errors

All input-validation failures raised by the extractor and the chart
composer. Each carries the offending value so the caller can fix the input.
"""
from typing import Optional


class ImpactPlotError(ValueError):
    """Base class for every impactplot validation failure."""


class MalformedTimestamp(ImpactPlotError):
    """A time-index label could not be turned into a valid, increasing timestamp."""
    def __init__(self, label, time_format: Optional[str] = None, reason: str = "unparseable"):
        self.label = label
        self.time_format = time_format
        self.reason = reason
        fmt = f" with format {time_format!r}" if time_format else ""
        super().__init__(f"Malformed timestamp label {label!r}{fmt}: {reason}")


class MissingField(ImpactPlotError):
    """A required value series is absent from the model result."""
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Model result is missing required series '{field}'")


class MisalignedSeries(ImpactPlotError):
    """A value series does not have one value per time-index entry."""
    def __init__(self, field: str, expected: int, actual: int):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Series '{field}' has {actual} values but the time index has {expected} periods"
        )


class EmptyResult(ImpactPlotError):
    """The model result contains zero periods."""
    def __init__(self):
        super().__init__("Model result contains no periods")


class EmptyTable(ImpactPlotError):
    """A chart was requested for a table without rows."""
    def __init__(self):
        super().__init__("Cannot build a chart from an empty result table")


class UnknownChartKind(ImpactPlotError):
    """The requested chart kind is not one of original, pointwise, cumulative."""
    def __init__(self, kind):
        self.kind = kind
        super().__init__(
            f"Unknown chart kind {kind!r}; expected one of 'original', 'pointwise', 'cumulative'"
        )


class InvalidPeriod(ImpactPlotError):
    """The pre/post split does not partition the timestamps into two non-empty phases."""


class UnknownStyleOption(ImpactPlotError):
    """A style mapping names an option StyleConfig does not recognize."""
    def __init__(self, option: str):
        self.option = option
        super().__init__(f"Unknown style option '{option}'")


class IntervalOrderWarning(UserWarning):
    """Model output violates lower <= estimate <= upper or the effect identity."""


class HeadroomWarning(UserWarning):
    """The observed-vs-predicted chart has no positive maximum to pin the axis to."""
