"""
Visualization Utilities Module
==============================

Style setup, palette and the three diagnostic figures: price distribution,
price by square footage group, and square footage vs price.
Each plotting function returns the Figure; saving is left to output.save_outputs.
"""

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving plots

import matplotlib.pyplot as plt
from matplotlib.ticker import StrMethodFormatter
import pandas as pd
import seaborn as sns

from . import config


def setup_style() -> None:
    """
    Configure matplotlib and seaborn style settings.

    Sets:
    - Seaborn white (minimal) style
    - Bold, centred titles and bold axis labels
    - Legend below the plot area
    """
    sns.set_theme(style='white', font_scale=1.1)
    plt.rcParams.update({
        'figure.figsize': (10, 6),
        'font.size': 14,
        'axes.titlesize': 16,
        'axes.titleweight': 'bold',
        'axes.titlelocation': 'center',
        'axes.labelsize': 12,
        'axes.labelweight': 'bold',
        'legend.loc': 'lower center',
    })


def get_colors() -> dict:
    """
    Return consistent color palette for plots.

    Returns:
        Dictionary with named colors and a per-group palette
    """
    return {
        'primary': '#4A90E2',      # Blue
        'accent': '#E94B3C',       # Red
        'edge': 'black',
        'groups': dict(zip(config.GROUP_LABELS, ['#50C878', '#FFA500', '#E94B3C'])),
    }


def comma_formatter() -> StrMethodFormatter:
    """Tick formatter with thousands separators."""
    return StrMethodFormatter('{x:,.0f}')


def _no_data(ax, message: str = 'No data') -> None:
    ax.text(0.5, 0.5, message, ha='center', va='center', transform=ax.transAxes)


def plot_price_histogram(
    df: pd.DataFrame,
    value_col: str = None,
    bins: int = None,
    percentile: float = None
) -> plt.Figure:
    """
    Density histogram of price with a kernel density curve.

    Parameters:
        df: Filtered DataFrame
        value_col: Column to plot. Defaults to config.PRICE_COL
        bins: Number of bins. Defaults to config.HISTOGRAM_BINS
        percentile: Outlier cap shown in the title. Defaults to config.OUTLIER_PERCENTILE

    Returns:
        Matplotlib figure
    """
    if value_col is None:
        value_col = config.PRICE_COL
    if bins is None:
        bins = config.HISTOGRAM_BINS
    if percentile is None:
        percentile = config.OUTLIER_PERCENTILE

    colors = get_colors()
    values = df[value_col].dropna()

    fig, ax = plt.subplots(figsize=(10, 6))
    if values.empty:
        _no_data(ax)
    else:
        sns.histplot(x=values, bins=bins, stat='density', color=colors['primary'],
                     edgecolor=colors['edge'], alpha=0.7, ax=ax)
        if values.nunique() > 1:
            sns.kdeplot(x=values, color=colors['accent'], linewidth=2, ax=ax)
        ax.xaxis.set_major_formatter(comma_formatter())

    ax.set_title(f"Distribution of Property Price ({percentile:.0%} Percentile Capped)")
    ax.set_xlabel('Price (USD)')
    ax.set_ylabel('Density')

    plt.tight_layout()
    return fig


def plot_price_by_group(
    df: pd.DataFrame,
    value_col: str = None,
    group_col: str = None,
    labels: list[str] = None
) -> plt.Figure:
    """
    Box plot of price for each square footage group.

    Parameters:
        df: Grouped DataFrame
        value_col: Column to plot. Defaults to config.PRICE_COL
        group_col: Group column. Defaults to config.GROUP_COL
        labels: Group order. Defaults to config.GROUP_LABELS

    Returns:
        Matplotlib figure
    """
    if value_col is None:
        value_col = config.PRICE_COL
    if group_col is None:
        group_col = config.GROUP_COL
    if labels is None:
        labels = list(config.GROUP_LABELS)

    colors = get_colors()
    palette = {label: colors['groups'].get(label, colors['primary']) for label in labels}
    plot_data = df.dropna(subset=[value_col, group_col])

    fig, ax = plt.subplots(figsize=(10, 6))
    if plot_data.empty:
        _no_data(ax)
    else:
        sns.boxplot(
            data=plot_data, x=group_col, y=value_col, hue=group_col,
            order=labels, hue_order=labels, palette=palette, legend=False,
            flierprops={'marker': 'o', 'markerfacecolor': colors['accent'],
                        'markeredgecolor': colors['accent'], 'markersize': 4},
            ax=ax,
        )
        ax.yaxis.set_major_formatter(comma_formatter())

    ax.set_title('Property Price by Square Footage Category')
    ax.set_xlabel(f"Square Footage Group ({' / '.join(labels)})")
    ax.set_ylabel('Price (USD)')

    plt.tight_layout()
    return fig


def plot_sqft_vs_price(
    df: pd.DataFrame,
    x_col: str = None,
    y_col: str = None
) -> plt.Figure:
    """
    Scatter of square footage against price with a linear fit and 95% band.

    Parameters:
        df: Filtered DataFrame
        x_col: Area column. Defaults to config.SQFT_COL
        y_col: Price column. Defaults to config.PRICE_COL

    Returns:
        Matplotlib figure
    """
    if x_col is None:
        x_col = config.SQFT_COL
    if y_col is None:
        y_col = config.PRICE_COL

    colors = get_colors()
    plot_data = df.dropna(subset=[x_col, y_col])

    fig, ax = plt.subplots(figsize=(12, 8))
    if plot_data.empty:
        _no_data(ax)
    elif plot_data[x_col].nunique() < 2:
        # Not enough spread for a regression line
        ax.scatter(plot_data[x_col], plot_data[y_col], color=colors['primary'], alpha=0.6, s=15)
    else:
        sns.regplot(
            data=plot_data, x=x_col, y=y_col, ci=95, color=colors['accent'],
            scatter_kws={'color': colors['primary'], 'alpha': 0.6, 's': 15},
            line_kws={'linewidth': 2},
            ax=ax,
        )
    ax.xaxis.set_major_formatter(comma_formatter())
    ax.yaxis.set_major_formatter(comma_formatter())

    ax.set_title('Relationship Between Square Footage and Price')
    ax.set_xlabel('Property Square Footage (sq ft)')
    ax.set_ylabel('Property Price (USD)')

    plt.tight_layout()
    return fig
