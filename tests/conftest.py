import numpy as np
import pandas as pd
import pytest

from impactplot_py.core import InterventionMarker, TimePeriod, extract
from impactplot_py.core.extractor import INFERENCE_COLUMNS

N_DAYS = 100
N_PRE = 60


def make_impact_frame(n_days=N_DAYS, n_pre=N_PRE, lift=80.0, seed=7):
    """
    Synthetic causal-impact output with canonical column names.

    Bounds are a fixed-width band around the prediction; effect bounds are
    derived from it and cumulative series run-sum the pointwise series from
    the first post-intervention day.
    """
    rng = np.random.default_rng(seed)
    days = pd.date_range('2024-01-01', periods=n_days, freq='D')
    t = np.arange(n_days)

    predicted = 1000 + 60 * np.sin(2 * np.pi * t / 7) + rng.normal(0, 5, n_days)
    observed = predicted + rng.normal(0, 20, n_days)
    observed[n_pre:] += lift
    width = 1.96 * 30

    df = pd.DataFrame({
        'observed': observed,
        'predicted': predicted,
        'predicted_lower': predicted - width,
        'predicted_upper': predicted + width,
    }, index=days)
    df['pointwise_effect'] = df['observed'] - df['predicted']
    df['pointwise_effect_lower'] = df['observed'] - df['predicted_upper']
    df['pointwise_effect_upper'] = df['observed'] - df['predicted_lower']

    post = np.arange(n_days) >= n_pre
    for suffix in ('', '_lower', '_upper'):
        effect = np.where(post, df[f'pointwise_effect{suffix}'], 0.0)
        df[f'cumulative_effect{suffix}'] = np.cumsum(effect)
    return df


@pytest.fixture
def impact_frame():
    return make_impact_frame()


@pytest.fixture
def inferences_frame(impact_frame):
    return impact_frame.rename(columns=INFERENCE_COLUMNS)


@pytest.fixture
def table(impact_frame):
    return extract(impact_frame)


@pytest.fixture
def period(table):
    return TimePeriod.from_timestamps(table.timestamps, table.timestamps[N_PRE - 1])


@pytest.fixture
def marker(period):
    return InterventionMarker.from_period(period)
