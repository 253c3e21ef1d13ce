"""
Typed chart descriptors.

A Chart is an ordered stack of layers (back-to-front) plus axis and label
descriptors. Nothing here knows about matplotlib; ``render`` consumes these
objects uniformly.
"""
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple, Union

import numpy as np
import pandas as pd


@dataclass(frozen=True, eq=False)
class RibbonLayer:
    """Filled uncertainty band between two series."""
    x: pd.DatetimeIndex
    lower: np.ndarray
    upper: np.ndarray
    color: str
    alpha: float
    name: str = 'interval'


@dataclass(frozen=True, eq=False)
class VLineLayer:
    """Vertical marker spanning the full value range."""
    x: pd.Timestamp
    color: str
    width: float
    pattern: str
    name: str = 'intervention'


@dataclass(frozen=True, eq=False)
class LineLayer:
    """
    A series drawn as a line.

    `role` is 'reference' for the counterfactual prediction, 'baseline' for
    the zero line and 'primary' for the series the chart is about.
    """
    x: pd.DatetimeIndex
    y: np.ndarray
    color: str
    width: float
    pattern: str
    role: str
    name: str = ''


Layer = Union[RibbonLayer, VLineLayer, LineLayer]


@dataclass(frozen=True)
class TimeAxis:
    """Declared time-axis ticks and their labels."""
    ticks: Tuple[pd.Timestamp, ...]
    labels: Tuple[str, ...]
    interval: str
    label_format: str
    limits: Optional[Tuple[pd.Timestamp, pd.Timestamp]] = None


@dataclass(frozen=True)
class ValueAxis:
    """
    Value-axis limits and label formatter.

    A ``None`` limit lets that end float to the data range.
    """
    lower: Optional[float] = None
    upper: Optional[float] = None
    formatter: Optional[Callable[[float], str]] = None
    title: Optional[str] = None

    @property
    def limits(self) -> Tuple[Optional[float], Optional[float]]:
        return (self.lower, self.upper)


@dataclass(frozen=True)
class Labels:
    """Optional titles added on top of a built chart."""
    title: Optional[str] = None
    subtitle: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None
    caption: Optional[str] = None

    def merge(self, other: 'Labels') -> 'Labels':
        """Fields set on `other` win."""
        changes = {k: v for k, v in vars(other).items() if v is not None}
        return replace(self, **changes)
