#!/usr/bin/env python3
"""
Impactplot Demo
===============

1. Simulate the per-period output of a fitted causal-impact model
   (a daily series with a +8% lift from day 61)
2. Extract it into a ResultTable
3. Build the three impact charts and save them as one figure

Usage:
    python examples/demo_impact.py
"""
import numpy as np
import pandas as pd

import impactplot
from impactplot import CurrencyFormatter, DEFAULT_STYLE, InterventionMarker, TimePeriod

np.random.seed(42)

# =============================================================================
# STEP 1: Model output (stand-in for a fitted CausalImpact result)
# =============================================================================
print("=" * 60)
print("IMPACTPLOT DEMO")
print("=" * 60)

n, n_pre = 100, 60
days = pd.date_range('2024-01-01', periods=n, freq='D')
t = np.arange(n)

pred = 12000 + 900 * np.sin(2 * np.pi * t / 7) + np.random.normal(0, 150, n)
obs = pred + np.random.normal(0, 300, n)
obs[n_pre:] *= 1.08
sd = 400 + 4 * np.maximum(t - n_pre, 0)   # uncertainty widens after the intervention

inferences = pd.DataFrame({
    'response': obs,
    'point_pred': pred,
    'point_pred_lower': pred - 1.96 * sd,
    'point_pred_upper': pred + 1.96 * sd,
}, index=days)
inferences['point_effect'] = obs - pred
inferences['point_effect_lower'] = obs - inferences['point_pred_upper']
inferences['point_effect_upper'] = obs - inferences['point_pred_lower']
post = t >= n_pre
for suffix in ('', '_lower', '_upper'):
    inferences[f'cum_effect{suffix}'] = np.cumsum(np.where(post, inferences[f'point_effect{suffix}'], 0.0))

# =============================================================================
# STEP 2: Extract
# =============================================================================
table = impactplot.extract(inferences)
period = TimePeriod.from_post_start(table.timestamps, days[n_pre])
marker = InterventionMarker.from_period(period)

print(f"  {table}")
print(f"  Intervention: {marker.timestamp.date()}")
print()
print(table.summary(period).round(1).to_string())
print()

# =============================================================================
# STEP 3: Charts
# =============================================================================
style = DEFAULT_STYLE.override(value_label_formatter=CurrencyFormatter(symbol='$', decimals=0))
fig = impactplot.render_panels(table, marker, style)
fig.savefig('impact_demo.png', dpi=150)
print("  Saved impact_demo.png")

# A single chart can be extended before rendering
chart = impactplot.build(table, 'original', marker, style) + impactplot.Labels(
    title='Daily revenue', subtitle='Observed vs. counterfactual'
)
impactplot.render(chart).savefig('impact_original.png', dpi=150)
print("  Saved impact_original.png")
