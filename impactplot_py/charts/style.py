"""
Shared visual style for every impact chart.

StyleConfig replaces process-wide style constants: it is an immutable value
passed explicitly into each build call. Variants are derived with
``override`` and never touch the shared default.
"""
import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Mapping, Union

from ..errors import UnknownStyleOption

# ggplot-style line type names -> matplotlib linestyles
LINE_PATTERNS = {
    'solid': '-',
    'dashed': (0, (4, 4)),
    'dotted': (0, (1, 3)),
    'dotdash': (0, (1, 3, 4, 3)),
    'longdash': (0, (8, 4)),
    'twodash': (0, (2, 2, 6, 2)),
}


def line_pattern(name: str):
    """Matplotlib linestyle for a named pattern."""
    try:
        return LINE_PATTERNS[name]
    except KeyError:
        raise ValueError(f"Unknown line pattern '{name}'; expected one of {sorted(LINE_PATTERNS)}")


@dataclass(frozen=True)
class CurrencyFormatter:
    """Format axis values as currency, e.g. ``$12,500``."""
    symbol: str = '$'
    decimals: int = 0
    suffix: bool = False

    def __call__(self, value: float) -> str:
        value = round(value, self.decimals)
        number = f"{abs(value):,.{self.decimals}f}"
        text = f"{number}{self.symbol}" if self.suffix else f"{self.symbol}{number}"
        return f"-{text}" if value < 0 else text


@dataclass(frozen=True)
class BaseTheme:
    """
    Minimal theme applied under every chart.

    Attributes:
        name: Theme identifier.
        show_y_title: Whether the value axis keeps a title.
        x_axis_line: Whether the time axis line is drawn.
        major_grid: Whether major horizontal gridlines are drawn.
        minor_x_grid: Whether minor vertical gridlines are drawn.
        grid_color: Color of the gridlines.
        font_size: Tick label size in points.
    """
    name: str = 'minimal'
    show_y_title: bool = False
    x_axis_line: bool = True
    major_grid: bool = True
    minor_x_grid: bool = False
    grid_color: str = '#EBEBEB'
    font_size: float = 9.0


@dataclass(frozen=True)
class StyleConfig:
    """
    Colors, widths, line patterns, axis formats and theme shared by all charts.

    Examples
    --------
    >>> style = DEFAULT_STYLE.override(ribbon_color='#D0E1F9')
    >>> euro = DEFAULT_STYLE.override(value_label_formatter=CurrencyFormatter(symbol='€'))
    """
    ribbon_color: str = '#E6E6FA'
    ribbon_alpha: float = 0.9
    main_line_width: float = 0.8
    main_line_color: str = '#404040'
    prediction_line_width: float = 0.6
    prediction_line_color: str = '#00008B'
    prediction_line_pattern: str = 'longdash'
    intervention_line_width: float = 0.8
    intervention_line_color: str = '#B3B3B3'
    intervention_line_pattern: str = 'dotted'
    date_tick_interval: str = '7D'
    date_label_format: str = '%m/%d'
    value_label_formatter: Callable[[float], str] = field(default_factory=CurrencyFormatter)
    base_theme: BaseTheme = field(default_factory=BaseTheme)

    def __post_init__(self):
        if not 0.0 <= self.ribbon_alpha <= 1.0:
            raise ValueError(f"ribbon_alpha must be within [0, 1], got {self.ribbon_alpha}")
        if not callable(self.value_label_formatter):
            raise ValueError(
                f"value_label_formatter must be callable, got {self.value_label_formatter!r}"
            )
        line_pattern(self.prediction_line_pattern)
        line_pattern(self.intervention_line_pattern)

    def override(self, **changes) -> 'StyleConfig':
        """Return a copy with some options replaced."""
        known = {f.name for f in fields(self)}
        for option in changes:
            if option not in known:
                raise UnknownStyleOption(option)
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'StyleConfig':
        """
        Build a config from plain values, e.g. parsed JSON.

        ``value_label_formatter`` and ``base_theme`` may be given as nested
        mappings of CurrencyFormatter / BaseTheme options.
        """
        options = dict(options)
        formatter = options.get('value_label_formatter')
        if isinstance(formatter, Mapping):
            options['value_label_formatter'] = _nested(CurrencyFormatter, formatter)
        theme = options.get('base_theme')
        if isinstance(theme, Mapping):
            options['base_theme'] = _nested(BaseTheme, theme)
        return DEFAULT_STYLE.override(**options)


def _nested(kind, options: Mapping[str, Any]):
    known = {f.name for f in fields(kind)}
    for option in options:
        if option not in known:
            raise UnknownStyleOption(option)
    return kind(**options)


def load_style(path: Union[str, Path]) -> StyleConfig:
    """Load style overrides from a JSON file."""
    with open(Path(path), 'r', encoding='utf-8') as f:
        return StyleConfig.from_dict(json.load(f))


DEFAULT_STYLE = StyleConfig()
