"""Pytest fixtures for the housing analysis tests."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from housing_core import config


@pytest.fixture
def scenario_df():
    """Four listings small enough to check bin membership by hand."""
    return pd.DataFrame({
        config.PRICE_COL: [100.0, 200.0, 150.0, 120.0],
        config.SQFT_COL: [500.0, 1500.0, 1000.0, 600.0],
    })


@pytest.fixture
def grouped_df():
    """Prices already assigned to the three groups, unequal group sizes."""
    groups = ['Low'] * 4 + ['Medium'] * 3 + ['High'] * 5
    prices = [1.0, 2.0, 3.0, 4.0, 4.0, 6.0, 5.0, 9.0, 7.0, 8.0, 10.0, 6.0]
    return pd.DataFrame({
        config.PRICE_COL: prices,
        config.GROUP_COL: pd.Categorical(groups, categories=list(config.GROUP_LABELS), ordered=True),
    })


@pytest.fixture
def raw_listings():
    """Raw listings as they appear in the source CSV (formatted text prices)."""
    rng = np.random.default_rng(42)
    n = 60
    sqft = 500 + 40 * np.arange(n)
    price = 150_000 + 350 * sqft + rng.integers(0, 50_000, size=n)

    df = pd.DataFrame({
        'BROKERTITLE': [f"Brokered by Agency {i % 5}" for i in range(n)],
        'TYPE': ['Condo for sale'] * n,
        'PRICE': [f"${p:,}" for p in price],
        'BEDS': rng.integers(1, 5, size=n),
        'PROPERTYSQFT': [f"{s:,}" for s in sqft],
    })
    df.loc[3, 'PRICE'] = 'Contact agent'
    df.loc[7, 'PROPERTYSQFT'] = ''
    df.loc[n - 1, 'PRICE'] = '$95,000,000'
    return df


@pytest.fixture
def raw_csv(tmp_path, raw_listings):
    """Path to a CSV holding raw_listings."""
    path = tmp_path / 'NY-House-Dataset.csv'
    raw_listings.to_csv(path, index=False)
    return path
