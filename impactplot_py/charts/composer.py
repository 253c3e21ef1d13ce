"""
Impactplot Chart Composer

Provides:
  - ChartKind: the three impact chart kinds
  - Chart: ordered layers plus axis/label descriptors, open to ``chart + element``
  - build: assemble one chart kind from a ResultTable and a StyleConfig
"""
import logging
import warnings
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Tuple, Union

import numpy as np
import pandas as pd
from pandas.tseries.frequencies import to_offset

from ..core.period import InterventionMarker
from ..core.table import ResultTable
from ..errors import EmptyTable, HeadroomWarning, UnknownChartKind
from .layers import Labels, Layer, LineLayer, RibbonLayer, TimeAxis, ValueAxis, VLineLayer
from .style import DEFAULT_STYLE, BaseTheme, StyleConfig

logger = logging.getLogger(__name__)

HEADROOM = 1.05


class ChartKind(Enum):
    ORIGINAL = 'original'
    POINTWISE = 'pointwise'
    CUMULATIVE = 'cumulative'

    @classmethod
    def parse(cls, kind) -> 'ChartKind':
        if isinstance(kind, cls):
            return kind
        try:
            return cls(kind)
        except ValueError:
            raise UnknownChartKind(kind) from None


# kind -> (band lower, band upper, primary series, reference series or None for a zero baseline)
KIND_SERIES = {
    ChartKind.ORIGINAL: ('predicted_lower', 'predicted_upper', 'observed', 'predicted'),
    ChartKind.POINTWISE: ('pointwise_effect_lower', 'pointwise_effect_upper', 'pointwise_effect', None),
    ChartKind.CUMULATIVE: ('cumulative_effect_lower', 'cumulative_effect_upper', 'cumulative_effect', None),
}


@dataclass(frozen=True)
class Chart:
    """
    A renderable impact chart.

    Layers are ordered back-to-front. Adding a layer, a Labels, a ValueAxis
    or a TimeAxis returns a new chart with that element appended or
    overriding the current one.
    """
    kind: ChartKind
    layers: Tuple[Layer, ...]
    x_axis: TimeAxis
    y_axis: ValueAxis
    theme: BaseTheme = field(default_factory=BaseTheme)
    labels: Labels = field(default_factory=Labels)

    def __add__(self, other) -> 'Chart':
        if isinstance(other, (RibbonLayer, VLineLayer, LineLayer)):
            return replace(self, layers=self.layers + (other,))
        if isinstance(other, Labels):
            return replace(self, labels=self.labels.merge(other))
        if isinstance(other, ValueAxis):
            return replace(self, y_axis=other)
        if isinstance(other, TimeAxis):
            return replace(self, x_axis=other)
        return NotImplemented

    def layer(self, name: str) -> Layer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(f"No layer named '{name}'")

    def draw(self, ax=None):
        """Render onto a matplotlib Axes (a new Figure when omitted)."""
        from .render import render
        return render(self, ax=ax)


def time_axis(timestamps: pd.DatetimeIndex, style: StyleConfig) -> TimeAxis:
    """
    Ticks every ``date_tick_interval`` up to the last timestamp.

    Fixed-length intervals (``'7D'``, ``'12h'``) start at the first
    timestamp. Anchored offsets (``'W-MON'``, ``'MS'``) start at the first
    anchor on or after it, as ``pandas.date_range`` does. A trailing partial
    interval gets no tick.
    """
    start, end = timestamps[0], timestamps[-1]
    ticks = pd.date_range(start=start, end=end, freq=to_offset(style.date_tick_interval))
    return TimeAxis(
        ticks=tuple(ticks),
        labels=tuple(ts.strftime(style.date_label_format) for ts in ticks),
        interval=style.date_tick_interval,
        label_format=style.date_label_format,
        limits=(start, end),
    )


def headroom_axis(table: ResultTable, style: StyleConfig) -> ValueAxis:
    """Value axis pinned at zero with 5% headroom over every plotted series."""
    peak = max(
        np.nanmax(table.column(name))
        for name in ('observed', 'predicted', 'predicted_lower', 'predicted_upper')
    )
    if not np.isfinite(peak) or peak <= 0:
        warnings.warn(
            f"Largest plotted value is {peak}; leaving the value axis unpinned",
            HeadroomWarning,
            stacklevel=3,
        )
        return ValueAxis(formatter=style.value_label_formatter)
    return ValueAxis(lower=0.0, upper=HEADROOM * float(peak), formatter=style.value_label_formatter)


def build(
    table: ResultTable,
    kind: Union[ChartKind, str],
    intervention: InterventionMarker,
    style: StyleConfig = DEFAULT_STYLE,
) -> Chart:
    """
    Compose one impact chart.

    Parameters
    ----------
    table : ResultTable
        Extracted model output; never modified.
    kind : ChartKind or {'original', 'pointwise', 'cumulative'}
        Which chart to build.
    intervention : InterventionMarker
        First post-intervention timestamp.
    style : StyleConfig
        Shared visual style.

    Returns
    -------
    Chart
        Layers: uncertainty band, intervention marker, reference line,
        primary series.
    """
    kind = ChartKind.parse(kind)
    if len(table) == 0:
        raise EmptyTable()
    if not isinstance(intervention, InterventionMarker):
        intervention = InterventionMarker(pd.Timestamp(intervention))

    lower, upper, primary, reference = KIND_SERIES[kind]
    x = table.timestamps

    band = RibbonLayer(
        x=x,
        lower=table.column(lower),
        upper=table.column(upper),
        color=style.ribbon_color,
        alpha=style.ribbon_alpha,
    )
    marker = VLineLayer(
        x=intervention.timestamp,
        color=style.intervention_line_color,
        width=style.intervention_line_width,
        pattern=style.intervention_line_pattern,
    )
    if reference is not None:
        secondary = LineLayer(
            x=x,
            y=table.column(reference),
            color=style.prediction_line_color,
            width=style.prediction_line_width,
            pattern=style.prediction_line_pattern,
            role='reference',
            name=reference,
        )
    else:
        secondary = LineLayer(
            x=x,
            y=np.zeros(len(x)),
            color=style.main_line_color,
            width=style.main_line_width,
            pattern='solid',
            role='baseline',
            name='baseline',
        )
    main = LineLayer(
        x=x,
        y=table.column(primary),
        color=style.main_line_color,
        width=style.main_line_width,
        pattern='solid',
        role='primary',
        name=primary,
    )

    if kind is ChartKind.ORIGINAL:
        y_axis = headroom_axis(table, style)
    else:
        y_axis = ValueAxis(formatter=style.value_label_formatter)

    chart = Chart(
        kind=kind,
        layers=(band, marker, secondary, main),
        x_axis=time_axis(x, style),
        y_axis=y_axis,
        theme=style.base_theme,
    )
    logger.debug(
        "Built %s chart: %d layers, %d x ticks, y limits %s",
        kind.value, len(chart.layers), len(chart.x_axis.ticks), chart.y_axis.limits,
    )
    return chart
