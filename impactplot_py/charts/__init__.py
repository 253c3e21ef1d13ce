from .composer import Chart, ChartKind, build, headroom_axis, time_axis
from .layers import Labels, LineLayer, RibbonLayer, TimeAxis, ValueAxis, VLineLayer
from .render import render, render_panels
from .style import DEFAULT_STYLE, BaseTheme, CurrencyFormatter, StyleConfig, load_style

__all__ = [
    'Chart', 'ChartKind', 'build', 'headroom_axis', 'time_axis',
    'Labels', 'LineLayer', 'RibbonLayer', 'TimeAxis', 'ValueAxis', 'VLineLayer',
    'render', 'render_panels',
    'DEFAULT_STYLE', 'BaseTheme', 'CurrencyFormatter', 'StyleConfig', 'load_style',
]
