import matplotlib.dates as mdates
from matplotlib.colors import to_hex
import pytest
from matplotlib.figure import Figure

from impactplot_py import plot_impact
from impactplot_py.charts import DEFAULT_STYLE, Labels, build, render, render_panels
from impactplot_py.core import extract
from impactplot_py.errors import IntervalOrderWarning, UnknownChartKind
from conftest import N_PRE


def test_render_original(table, marker):
    chart = build(table, 'original', marker)
    fig = render(chart)
    ax = fig.axes[0]

    assert isinstance(fig, Figure)
    assert len(ax.collections) == 1      # uncertainty band
    assert len(ax.lines) == 3            # marker, prediction, observed
    assert ax.get_ylim() == pytest.approx(chart.y_axis.limits)

    marker_line, prediction, observed = ax.lines
    assert to_hex(marker_line.get_color()) == to_hex(DEFAULT_STYLE.intervention_line_color)
    assert to_hex(prediction.get_color()) == to_hex(DEFAULT_STYLE.prediction_line_color)
    assert observed.get_linestyle() == '-'


def test_render_axis_formatting(table, marker):
    chart = build(table, 'pointwise', marker)
    ax = render(chart).axes[0]

    ticks = ax.xaxis.get_major_locator().tick_values(0, 0)
    assert list(ticks) == list(mdates.date2num(list(chart.x_axis.ticks)))
    assert ax.yaxis.get_major_formatter()(12500.0, 0) == '$12,500'


def test_render_applies_minimal_theme(table, marker):
    ax = render(build(table, 'cumulative', marker)).axes[0]
    assert not ax.spines['top'].get_visible()
    assert not ax.spines['right'].get_visible()
    assert not ax.spines['left'].get_visible()
    assert ax.spines['bottom'].get_visible()
    assert ax.get_ylabel() == ''


def test_render_labels_onto_existing_axes(table, marker):
    fig = Figure()
    ax = fig.add_subplot(1, 1, 1)
    chart = build(table, 'original', marker) + Labels(title='Daily sessions', y='Sessions')

    assert render(chart, ax=ax) is fig
    assert ax.get_title(loc='left') == 'Daily sessions'
    assert ax.get_ylabel() == 'Sessions'


def test_chart_draw(table, marker):
    fig = build(table, 'pointwise', marker).draw()
    assert len(fig.axes) == 1


def test_render_panels(table, marker):
    fig = render_panels(table, marker)
    assert len(fig.axes) == 3
    assert [ax.get_title(loc='left') for ax in fig.axes] == [
        'Observed vs. predicted', 'Pointwise effect', 'Cumulative effect',
    ]


def test_render_panels_subset(table, marker):
    fig = render_panels(table, marker, kinds=['cumulative'], titles=False)
    assert len(fig.axes) == 1
    assert fig.axes[0].get_title(loc='left') == ''


def test_render_panels_unknown_kind(table, marker):
    with pytest.raises(UnknownChartKind):
        render_panels(table, marker, kinds=['original', 'seasonal'])


def test_plot_impact(impact_frame, table):
    fig = plot_impact(impact_frame, table.timestamps[N_PRE], kind='original')
    assert len(fig.axes) == 1
    assert len(plot_impact(impact_frame, '2024-03-01').axes) == 3


def test_cumulative_from_first_day_warns(impact_frame, marker):
    frame = impact_frame.copy()
    for suffix in ('', '_lower', '_upper'):
        frame[f'cumulative_effect{suffix}'] = frame[f'pointwise_effect{suffix}'].cumsum()
    table = extract(frame)
    with pytest.warns(IntervalOrderWarning, match='running sum'):
        render_panels(table, marker, kinds=['original'])
    with pytest.warns(IntervalOrderWarning, match='not zero before'):
        plot_impact(frame, marker.timestamp, kind='cumulative')
