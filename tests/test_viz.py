"""Smoke tests for the diagnostic figures."""
from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from housing_core import config, data, viz


@pytest.fixture
def prepared(raw_listings):
    df = data.coerce_numeric_columns(data.rename_columns(raw_listings))
    df, _ = data.cap_outliers(df)
    df, _ = data.create_sqft_groups(df)
    return df


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestPalette:
    """Test colors and formatters."""

    def test_group_colors(self):
        """Test each default label has a color."""
        colors = viz.get_colors()
        assert set(colors['groups']) == set(config.GROUP_LABELS)
        assert colors['primary'] == '#4A90E2'

    def test_comma_formatter(self):
        """Test thousands separators in tick labels."""
        assert viz.comma_formatter()(1234567, 0) == '1,234,567'

    def test_setup_style(self):
        """Test style setup applies bold titles."""
        viz.setup_style()
        assert plt.rcParams['axes.titleweight'] == 'bold'


class TestFigures:
    """Test each plot renders."""

    def test_price_histogram(self, prepared):
        """Test histogram title reflects the cap."""
        fig = viz.plot_price_histogram(prepared, percentile=0.95)
        ax = fig.axes[0]
        assert '95% Percentile Capped' in ax.get_title()
        assert ax.get_ylabel() == 'Density'

    def test_price_by_group(self, prepared):
        """Test box plot puts the groups in label order."""
        fig = viz.plot_price_by_group(prepared)
        fig.canvas.draw()
        ax = fig.axes[0]
        ticks = [t.get_text() for t in ax.get_xticklabels()]
        assert ticks == list(config.GROUP_LABELS)

    def test_sqft_vs_price(self, prepared):
        """Test scatter has the fitted line."""
        fig = viz.plot_sqft_vs_price(prepared)
        ax = fig.axes[0]
        assert ax.get_xlabel() == 'Property Square Footage (sq ft)'
        assert len(ax.lines) >= 1

    def test_empty_data(self):
        """Test figures render a placeholder when nothing survived filtering."""
        empty = pd.DataFrame({
            config.PRICE_COL: pd.Series([], dtype=float),
            config.SQFT_COL: pd.Series([], dtype=float),
            config.GROUP_COL: pd.Categorical([], categories=list(config.GROUP_LABELS)),
        })
        for plot in (viz.plot_price_histogram, viz.plot_price_by_group, viz.plot_sqft_vs_price):
            fig = plot(empty)
            assert fig.axes[0].texts[0].get_text() == 'No data'

    def test_single_area_value(self):
        """Test the scatter falls back to points when area has no spread."""
        df = pd.DataFrame({config.SQFT_COL: [1000.0, 1000.0], config.PRICE_COL: [1.0, np.nan]})
        fig = viz.plot_sqft_vs_price(df)
        assert len(fig.axes[0].collections) == 1
