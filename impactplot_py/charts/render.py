"""
Matplotlib backend for impact charts.

Draws Chart descriptors onto a ``matplotlib.figure.Figure``. Figures are
created without pyplot, so nothing is shown or saved implicitly.
"""
import logging
from typing import Iterable, Optional, Tuple

import matplotlib.dates as mdates
from matplotlib.figure import Figure
from matplotlib.ticker import FixedLocator, FuncFormatter, NullLocator

from ..core.period import InterventionMarker
from ..core.table import ResultTable, cumulative_violations, warn_violations
from ..errors import EmptyTable
from .composer import Chart, ChartKind, build
from .layers import Labels, LineLayer, RibbonLayer, VLineLayer
from .style import DEFAULT_STYLE, BaseTheme, StyleConfig, line_pattern

logger = logging.getLogger(__name__)

PANEL_TITLES = {
    ChartKind.ORIGINAL: 'Observed vs. predicted',
    ChartKind.POINTWISE: 'Pointwise effect',
    ChartKind.CUMULATIVE: 'Cumulative effect',
}


def _draw_layer(ax, layer):
    if isinstance(layer, RibbonLayer):
        ax.fill_between(
            layer.x, layer.lower, layer.upper,
            facecolor=layer.color, edgecolor='none', alpha=layer.alpha,
            interpolate=True, label=layer.name,
        )
    elif isinstance(layer, VLineLayer):
        ax.axvline(
            layer.x, color=layer.color, linewidth=layer.width,
            linestyle=line_pattern(layer.pattern), label=layer.name,
        )
    elif isinstance(layer, LineLayer):
        ax.plot(
            layer.x, layer.y, color=layer.color, linewidth=layer.width,
            linestyle=line_pattern(layer.pattern), label=layer.name,
        )
    else:
        raise TypeError(f"Cannot draw layer of type {type(layer).__name__}")


def _apply_theme(ax, theme: BaseTheme):
    for side in ('top', 'right', 'left'):
        ax.spines[side].set_visible(False)
    ax.spines['bottom'].set_visible(theme.x_axis_line)
    ax.tick_params(axis='both', length=0, labelsize=theme.font_size)
    ax.set_axisbelow(True)
    if theme.major_grid:
        ax.grid(True, axis='y', which='major', color=theme.grid_color, linewidth=0.6)
    if not theme.minor_x_grid:
        ax.xaxis.set_minor_locator(NullLocator())
        ax.grid(False, axis='x', which='minor')
    if not theme.show_y_title:
        ax.set_ylabel('')


def render(chart: Chart, ax=None) -> Figure:
    """
    Draw a chart.

    Parameters
    ----------
    chart : Chart
        Output of ``build`` (possibly extended with ``+``).
    ax : matplotlib.axes.Axes, optional
        Target axes. A new Figure with a single Axes is created when omitted.

    Returns
    -------
    matplotlib.figure.Figure
    """
    if ax is None:
        fig = Figure(figsize=(8, 3))
        ax = fig.add_subplot(1, 1, 1)
    else:
        fig = ax.figure

    for layer in chart.layers:
        _draw_layer(ax, layer)

    x_axis = chart.x_axis
    if x_axis.limits is not None:
        ax.set_xlim(*x_axis.limits)
    ax.xaxis.set_major_locator(FixedLocator(mdates.date2num(list(x_axis.ticks))))
    ax.set_xticklabels(list(x_axis.labels))

    y_axis = chart.y_axis
    if y_axis.lower is not None or y_axis.upper is not None:
        ax.set_ylim(bottom=y_axis.lower, top=y_axis.upper)
    if y_axis.formatter is not None:
        formatter = y_axis.formatter
        ax.yaxis.set_major_formatter(FuncFormatter(lambda value, _pos: formatter(value)))

    _apply_theme(ax, chart.theme)

    labels = chart.labels
    if labels.title:
        ax.set_title(labels.title, loc='left')
    if labels.subtitle:
        ax.text(0.0, 1.01, labels.subtitle, transform=ax.transAxes, fontsize='small', va='bottom')
    if labels.x:
        ax.set_xlabel(labels.x)
    if labels.y or y_axis.title:
        ax.set_ylabel(labels.y or y_axis.title)
    if labels.caption:
        fig.text(0.99, 0.01, labels.caption, ha='right', va='bottom', fontsize='small')

    logger.debug("Rendered %s chart with %d layers", chart.kind.value, len(chart.layers))
    return fig


def render_panels(
    table: ResultTable,
    intervention: InterventionMarker,
    style: StyleConfig = DEFAULT_STYLE,
    kinds: Iterable = ('original', 'pointwise', 'cumulative'),
    figsize: Optional[Tuple[float, float]] = None,
    titles: bool = True,
) -> Figure:
    """
    Stack several chart kinds on one figure sharing the time axis.

    Every kind is validated before anything is drawn. Cumulative series
    that are not zero before the intervention, or that do not run-sum the
    pointwise effect after it, emit an IntervalOrderWarning.
    """
    kinds = [ChartKind.parse(kind) for kind in kinds]
    if len(table) == 0:
        raise EmptyTable()
    charts = [build(table, kind, intervention, style) for kind in kinds]
    post_start = getattr(intervention, 'timestamp', intervention)
    warn_violations(cumulative_violations(table, post_start))

    fig = Figure(figsize=figsize or (10, 3 * len(charts)), layout='constrained')
    axes = fig.subplots(len(charts), 1, sharex=True, squeeze=False)[:, 0]
    for ax, chart in zip(axes, charts):
        if titles:
            chart = chart + Labels(title=PANEL_TITLES[chart.kind])
        render(chart, ax=ax)
    return fig
