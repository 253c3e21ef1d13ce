import numpy as np
import pandas as pd
import pytest

from impactplot_py.charts import (
    DEFAULT_STYLE,
    ChartKind,
    Labels,
    LineLayer,
    RibbonLayer,
    ValueAxis,
    VLineLayer,
    build,
)
from impactplot_py.core import VALUE_COLUMNS, ResultTable, extract
from impactplot_py.errors import EmptyTable, HeadroomWarning, UnknownChartKind
from conftest import N_DAYS, N_PRE, make_impact_frame


@pytest.mark.parametrize('kind', ['original', 'pointwise', 'cumulative'])
def test_layer_order(table, marker, kind):
    chart = build(table, kind, marker, DEFAULT_STYLE)
    band, vline, secondary, primary = chart.layers
    assert isinstance(band, RibbonLayer)
    assert isinstance(vline, VLineLayer)
    assert isinstance(secondary, LineLayer)
    assert isinstance(primary, LineLayer)
    assert primary.role == 'primary'
    assert primary.pattern == 'solid'
    assert vline.x == marker.timestamp
    assert chart.kind is ChartKind(kind)


def test_original_chart_series(table, marker):
    chart = build(table, 'original', marker)
    band, _, reference, primary = chart.layers
    np.testing.assert_array_equal(band.lower, table.column('predicted_lower'))
    np.testing.assert_array_equal(band.upper, table.column('predicted_upper'))
    np.testing.assert_array_equal(reference.y, table.column('predicted'))
    np.testing.assert_array_equal(primary.y, table.column('observed'))

    assert reference.role == 'reference'
    assert reference.color == DEFAULT_STYLE.prediction_line_color
    assert reference.width == DEFAULT_STYLE.prediction_line_width
    assert reference.pattern == DEFAULT_STYLE.prediction_line_pattern


def test_original_axis_headroom(table, marker):
    chart = build(table, ChartKind.ORIGINAL, marker)
    peak = max(
        table.column('observed').max(),
        table.column('predicted').max(),
        table.column('predicted_upper').max(),
    )
    assert chart.y_axis.lower == 0
    assert chart.y_axis.upper == pytest.approx(1.05 * peak)


def test_original_axis_pins_zero_for_positive_data(marker):
    frame = make_impact_frame()
    frame[['observed', 'predicted', 'predicted_lower', 'predicted_upper']] += 5000
    chart = build(extract(frame), 'original', marker)
    assert chart.y_axis.lower == 0.0


@pytest.mark.parametrize('kind', ['pointwise', 'cumulative'])
def test_effect_axes_float(table, marker, kind):
    chart = build(table, kind, marker)
    assert chart.y_axis.limits == (None, None)
    assert chart.y_axis.formatter is DEFAULT_STYLE.value_label_formatter


def test_pointwise_scenario(table, marker):
    """100 days, intervention on day 61: flat zero reference and a full-width band."""
    assert marker.timestamp == table.timestamps[N_PRE]
    chart = build(table, 'pointwise', marker)
    band, _, baseline, primary = chart.layers

    assert baseline.role == 'baseline'
    assert len(baseline.x) == N_DAYS
    assert np.all(baseline.y == 0)
    assert baseline.color == DEFAULT_STYLE.main_line_color
    assert baseline.pattern == 'solid'

    assert len(band.x) == N_DAYS
    np.testing.assert_array_equal(band.lower, table.column('pointwise_effect_lower'))
    np.testing.assert_array_equal(band.upper, table.column('pointwise_effect_upper'))
    assert np.all(band.upper[:N_PRE] - band.lower[:N_PRE] > 0)

    np.testing.assert_array_equal(primary.y, table.column('pointwise_effect'))


def test_cumulative_chart(table, marker):
    band, _, baseline, primary = build(table, 'cumulative', marker).layers
    np.testing.assert_array_equal(band.lower, table.column('cumulative_effect_lower'))
    np.testing.assert_array_equal(primary.y, table.column('cumulative_effect'))
    assert baseline.role == 'baseline'
    assert np.all(baseline.y == 0)


def test_ribbon_and_marker_style(table, marker):
    style = DEFAULT_STYLE.override(ribbon_color='#CCCCFF', ribbon_alpha=0.5,
                                   intervention_line_color='#FF0000')
    band, vline, _, _ = build(table, 'original', marker, style).layers
    assert band.color == '#CCCCFF'
    assert band.alpha == 0.5
    assert vline.color == '#FF0000'
    assert vline.pattern == 'dotted'
    assert vline.width == style.intervention_line_width


def test_unknown_kind(table, marker):
    with pytest.raises(UnknownChartKind) as exc:
        build(table, 'seasonal', marker)
    assert exc.value.kind == 'seasonal'


def test_empty_table(marker):
    empty = ResultTable(pd.DatetimeIndex([]), {name: [] for name in VALUE_COLUMNS})
    with pytest.raises(EmptyTable):
        build(empty, 'original', marker)


def test_weekly_ticks_round_trip(table, marker):
    style = DEFAULT_STYLE.override(date_label_format='%Y-%m-%d')
    axis = build(table, 'original', marker, style).x_axis

    parsed = pd.to_datetime(list(axis.labels), format='%Y-%m-%d')
    assert list(parsed) == list(axis.ticks)
    assert set(parsed) <= set(table.timestamps)
    assert all(np.diff(parsed.values) == np.timedelta64(7, 'D'))
    assert parsed[0] == table.timestamps[0]


def test_partial_final_interval_is_dropped(table, marker):
    axis = build(table, 'original', marker).x_axis
    # 100 days: ticks on days 0, 7, ..., 98; the 2-day remainder gets none
    assert len(axis.ticks) == 15
    assert axis.ticks[-1] == table.timestamps[98]
    assert axis.limits == (table.timestamps[0], table.timestamps[-1])
    assert axis.labels[0] == '01/01'


def test_custom_tick_interval(table, marker):
    style = DEFAULT_STYLE.override(date_tick_interval='30D', date_label_format='%b %d')
    axis = build(table, 'pointwise', marker, style).x_axis
    assert axis.labels == ('Jan 01', 'Jan 31', 'Mar 01', 'Mar 31')


def test_anchored_interval_snaps_to_anchor(table, marker):
    style = DEFAULT_STYLE.override(date_tick_interval='MS', date_label_format='%Y-%m-%d')
    axis = build(table, 'original', marker, style).x_axis
    # 2024-01-01 is already a month start; 2024-04-09 is the last day
    assert axis.labels == ('2024-01-01', '2024-02-01', '2024-03-01', '2024-04-01')

    weekly = DEFAULT_STYLE.override(date_tick_interval='W-WED')
    ticks = build(table, 'original', marker, weekly).x_axis.ticks
    assert ticks[0] == pd.Timestamp('2024-01-03')
    assert all(ts.dayofweek == 2 for ts in ticks)


def test_build_does_not_mutate_table(table, marker):
    before = table.frame
    for kind in ChartKind:
        build(table, kind, marker)
    pd.testing.assert_frame_equal(table.frame, before)


def test_chart_is_open_to_composition(table, marker):
    chart = build(table, 'original', marker)
    extra = LineLayer(x=table.timestamps, y=np.full(len(table), 900.0), color='red',
                      width=0.5, pattern='dashed', role='reference', name='target')

    titled = chart + Labels(title='Sessions') + Labels(subtitle='Daily') + extra
    assert titled.labels.title == 'Sessions'
    assert titled.labels.subtitle == 'Daily'
    assert titled.layers[-1] is extra
    assert len(chart.layers) == 4
    assert chart.labels.title is None

    rescaled = chart + ValueAxis(lower=500, upper=2000)
    assert rescaled.y_axis.limits == (500, 2000)
    assert rescaled.layer('observed') is chart.layer('observed')


def test_non_positive_peak_leaves_axis_floating(marker):
    frame = make_impact_frame()
    frame[['observed', 'predicted', 'predicted_lower', 'predicted_upper']] -= 5000
    with pytest.warns(HeadroomWarning):
        chart = build(extract(frame), 'original', marker)
    assert chart.y_axis.limits == (None, None)
