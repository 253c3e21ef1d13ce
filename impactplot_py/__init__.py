# Impactplot Python Package
__version__ = '0.1.0'

import logging

from .core import (
    INFERENCE_COLUMNS,
    VALUE_COLUMNS,
    InterventionMarker,
    ModelResult,
    ResultRow,
    ResultTable,
    TimePeriod,
    cumulative_violations,
    extract,
    warn_violations,
)
from .charts import (
    DEFAULT_STYLE,
    BaseTheme,
    Chart,
    ChartKind,
    CurrencyFormatter,
    Labels,
    StyleConfig,
    TimeAxis,
    ValueAxis,
    build,
    load_style,
    render,
    render_panels,
)
from .errors import (
    EmptyResult,
    EmptyTable,
    ImpactPlotError,
    InvalidPeriod,
    MalformedTimestamp,
    MisalignedSeries,
    MissingField,
    UnknownChartKind,
    UnknownStyleOption,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())


def plot_impact(model_result, post_start, *, kind=None, style=DEFAULT_STYLE, time_format=None):
    """
    Extract a model result and draw it in one call.

    Parameters
    ----------
    model_result : ModelResult, pd.DataFrame or inferences-style object
        Fitted model output.
    post_start : timestamp-like
        First post-intervention period.
    kind : str or ChartKind, optional
        Draw a single chart kind. All three panels are stacked when omitted.
    style : StyleConfig
        Shared visual style.
    time_format : str, optional
        strftime format of the time-index labels.

    Returns
    -------
    matplotlib.figure.Figure

    Example
    -------
    >>> import impactplot
    >>> fig = impactplot.plot_impact(impact, '2024-03-01', kind='pointwise')
    """
    table = extract(model_result, time_format=time_format)
    period = TimePeriod.from_post_start(table.timestamps, post_start)
    marker = InterventionMarker.from_period(period)
    if kind is None:
        return render_panels(table, marker, style)
    warn_violations(cumulative_violations(table, marker.timestamp))
    return render(build(table, kind, marker, style))


__all__ = [
    'extract', 'build', 'render', 'render_panels', 'plot_impact',
    'ModelResult', 'ResultRow', 'ResultTable', 'VALUE_COLUMNS', 'INFERENCE_COLUMNS',
    'TimePeriod', 'InterventionMarker',
    'Chart', 'ChartKind', 'Labels', 'TimeAxis', 'ValueAxis',
    'StyleConfig', 'DEFAULT_STYLE', 'BaseTheme', 'CurrencyFormatter', 'load_style',
    'ImpactPlotError', 'MalformedTimestamp', 'MissingField', 'MisalignedSeries',
    'EmptyResult', 'EmptyTable', 'UnknownChartKind', 'InvalidPeriod', 'UnknownStyleOption',
]
