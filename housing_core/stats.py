"""
Statistical Tests Module
========================

Group summaries, one-way ANOVA and Tukey HSD post-hoc comparisons.

Degenerate inputs (no data, a single non-empty group, zero variance) never
raise; the affected statistics come back as NaN so the caller can decide how
to report them.
"""

from itertools import combinations
from typing import Sequence

import pandas as pd
import numpy as np
from scipy import stats as scipy_stats

from . import config


def _resolve(value_col, group_col, labels):
    if value_col is None:
        value_col = config.PRICE_COL
    if group_col is None:
        group_col = config.GROUP_COL
    if labels is None:
        labels = config.GROUP_LABELS
    return value_col, group_col, list(labels)


def _group_arrays(
    df: pd.DataFrame,
    value_col: str,
    group_col: str,
    labels: list[str]
) -> dict[str, np.ndarray]:
    """Non-missing values per label, in label order."""
    valid = df[df[group_col].notna() & df[value_col].notna()]
    return {
        label: valid.loc[valid[group_col] == label, value_col].to_numpy(dtype=float)
        for label in labels
    }


def _round_off_floor(values: np.ndarray) -> tuple[float, float]:
    """
    Rounding-noise floors for a sum of squared deviations and for a
    difference of means, relative to the magnitude of the values.

    Identical prices such as 0.1 do not average back to exactly 0.1, so their
    deviations come out near 1e-17 instead of 0. Anything at or below these
    floors is treated as zero.
    """
    if len(values) == 0:
        return 0.0, 0.0
    eps = len(values) * np.finfo(float).eps
    scale = float(np.max(np.abs(values)))
    return eps * scale ** 2, eps * scale


def summarize_groups(
    df: pd.DataFrame,
    value_col: str = None,
    group_col: str = None,
    labels: Sequence[str] = None
) -> pd.DataFrame:
    """
    Calculate count, mean, median and standard deviation of price by group.

    Every label gets a row, in label order. Empty groups have n = 0 and NaN
    statistics; a group of one has a NaN standard deviation.

    Parameters:
        df: Input DataFrame
        value_col: Column to summarise. Defaults to config.PRICE_COL
        group_col: Column with group labels. Defaults to config.GROUP_COL
        labels: Group labels in output order. Defaults to config.GROUP_LABELS

    Returns:
        DataFrame indexed by label with n, mean_price, median_price, sd_price
    """
    value_col, group_col, labels = _resolve(value_col, group_col, labels)

    valid = df[df[group_col].notna() & df[value_col].notna()]
    grouped = valid[value_col].astype(float).groupby(valid[group_col], observed=False)

    summary = pd.DataFrame({
        'n': grouped.count(),
        'mean_price': grouped.mean(),
        'median_price': grouped.median(),
        'sd_price': grouped.std(ddof=1),
    }).reindex(labels)

    summary['n'] = summary['n'].fillna(0).astype(int)
    summary.index = pd.Index(labels, name=group_col)
    return summary


def run_anova(
    df: pd.DataFrame,
    value_col: str = None,
    group_col: str = None,
    labels: Sequence[str] = None,
    alpha: float = None
) -> dict:
    """
    Perform one-way ANOVA with effect size calculation.

    The total sum of squares is split into between-group and within-group
    parts; F = MS_between / MS_within and the p-value is the upper tail of
    F(k-1, N-k), where k counts the non-empty groups. Sums of squares at
    rounding-noise level are taken as exactly zero, so identical prices give
    F = NaN whatever their decimal value.

    Parameters:
        df: Input DataFrame
        value_col: Column with values to compare. Defaults to config.PRICE_COL
        group_col: Column with group labels. Defaults to config.GROUP_COL
        labels: Group labels. Defaults to config.GROUP_LABELS
        alpha: Significance level. Defaults to config.SIGNIFICANCE_LEVEL

    Returns:
        Dictionary with the sum-of-squares decomposition, F-statistic,
        p-value, eta-squared and interpretation. 'defined' is False (and
        'reason' says why) when fewer than two groups have data.
    """
    value_col, group_col, labels = _resolve(value_col, group_col, labels)
    if alpha is None:
        alpha = config.SIGNIFICANCE_LEVEL

    groups = _group_arrays(df, value_col, group_col, labels)
    present = {label: g for label, g in groups.items() if len(g) > 0}
    values = np.concatenate(list(present.values())) if present else np.array([], dtype=float)

    n_total = len(values)
    n_groups = len(present)

    result = {
        'factor': group_col,
        'response': value_col,
        'group_sizes': {label: len(g) for label, g in groups.items()},
        'group_means': {label: (g.mean() if len(g) else np.nan) for label, g in groups.items()},
        'grand_mean': np.nan,
        'ss_between': np.nan,
        'ss_within': np.nan,
        'ss_total': np.nan,
        'df_between': max(n_groups - 1, 0),
        'df_within': max(n_total - n_groups, 0),
        'ms_between': np.nan,
        'ms_within': np.nan,
        'f_statistic': np.nan,
        'p_value': np.nan,
        'eta_squared': np.nan,
        'n_groups': n_groups,
        'n_total': n_total,
        'defined': False,
        'reason': None,
    }

    if n_total == 0:
        result['reason'] = 'no data'
    elif n_groups < 2:
        result['reason'] = 'insufficient groups'
    else:
        grand_mean = values.mean()
        ss_between = sum(len(g) * (g.mean() - grand_mean) ** 2 for g in present.values())
        ss_within = sum(((g - g.mean()) ** 2).sum() for g in present.values())
        ss_total = ((values - grand_mean) ** 2).sum()

        ss_floor, _ = _round_off_floor(values)
        ss_between, ss_within, ss_total = (
            0.0 if ss <= ss_floor else float(ss) for ss in (ss_between, ss_within, ss_total)
        )

        df_between = result['df_between']
        df_within = result['df_within']

        with np.errstate(divide='ignore', invalid='ignore'):
            ms_between = np.float64(ss_between) / df_between
            ms_within = np.float64(ss_within) / df_within if df_within > 0 else np.nan
            f_stat = ms_between / ms_within
            eta_squared = ss_between / ss_total if ss_total > 0 else np.nan

        p_value = scipy_stats.f.sf(f_stat, df_between, df_within) if df_within > 0 else np.nan

        result.update({
            'grand_mean': grand_mean,
            'ss_between': float(ss_between),
            'ss_within': float(ss_within),
            'ss_total': float(ss_total),
            'ms_between': float(ms_between),
            'ms_within': float(ms_within),
            'f_statistic': float(f_stat),
            'p_value': float(p_value),
            'eta_squared': float(eta_squared),
            'defined': True,
        })

    result['effect_size'] = config.get_effect_size_label(result['eta_squared'])
    result['significant'] = bool(result['p_value'] < alpha)
    result['sig_marker'] = config.get_significance_marker(result['p_value'])
    return result


def anova_table(result: dict) -> pd.DataFrame:
    """
    Convert run_anova() output to the classic ANOVA table.

    Returns:
        DataFrame with one row for the group term and one for residuals
    """
    rows = [
        {
            'term': result['factor'],
            'df': result['df_between'],
            'sum_sq': result['ss_between'],
            'mean_sq': result['ms_between'],
            'f_value': result['f_statistic'],
            'p_value': result['p_value'],
        },
        {
            'term': 'Residuals',
            'df': result['df_within'],
            'sum_sq': result['ss_within'],
            'mean_sq': result['ms_within'],
            'f_value': np.nan,
            'p_value': np.nan,
        },
    ]
    return pd.DataFrame(rows).set_index('term')


def run_tukey_hsd(
    df: pd.DataFrame,
    value_col: str = None,
    group_col: str = None,
    labels: Sequence[str] = None,
    alpha: float = None
) -> pd.DataFrame:
    """
    Perform Tukey's HSD post-hoc test.

    Pairs are reported with group1 before group2 in label order and
    meandiff = mean(group2) - mean(group1). The test itself is
    scipy.stats.tukey_hsd over the non-empty groups, with a
    (1 - alpha) simultaneous confidence interval.

    A pair cannot be tested (NaN row, reject False) when either group is
    empty, when fewer than two groups have data, or when any non-empty group
    holds a single record. With zero within-group variance the interval
    collapses to the difference itself: distinct means get p_adj = 0 and
    equal means get p_adj = NaN.

    Parameters:
        df: Input DataFrame
        value_col: Column with values to compare. Defaults to config.PRICE_COL
        group_col: Column with group labels. Defaults to config.GROUP_COL
        labels: Group labels. Defaults to config.GROUP_LABELS
        alpha: Family-wise error rate. Defaults to config.TUKEY_ALPHA

    Returns:
        DataFrame with pairwise comparisons
    """
    from scipy.stats import tukey_hsd

    value_col, group_col, labels = _resolve(value_col, group_col, labels)
    if alpha is None:
        alpha = config.TUKEY_ALPHA
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must be between 0 and 1, got {alpha}")

    groups = _group_arrays(df, value_col, group_col, labels)
    present = [label for label in labels if len(groups[label]) > 0]
    samples = [groups[label] for label in present]
    position = {label: i for i, label in enumerate(present)}

    values = np.concatenate(samples) if samples else np.array([], dtype=float)
    ss_floor, diff_floor = _round_off_floor(values)
    ss_within = sum(((g - g.mean()) ** 2).sum() for g in samples)

    testable = len(samples) >= 2 and all(len(g) > 1 for g in samples)
    result = ci = None
    if testable and ss_within > ss_floor:
        result = tukey_hsd(*samples)
        ci = result.confidence_interval(confidence_level=1 - alpha)

    comparisons = []
    for name1, name2 in combinations(labels, 2):
        row = {
            'group1': name1,
            'group2': name2,
            'meandiff': np.nan,
            'lower': np.nan,
            'upper': np.nan,
            'p_adj': np.nan,
            'reject': False,
        }

        if testable and name1 in position and name2 in position:
            i, j = position[name1], position[name2]
            if result is not None:
                # statistic[j, i] is mean(group j) - mean(group i)
                row.update({
                    'meandiff': float(result.statistic[j, i]),
                    'lower': float(ci.low[j, i]),
                    'upper': float(ci.high[j, i]),
                    'p_adj': float(result.pvalue[j, i]),
                })
            else:
                diff = float(groups[name2].mean() - groups[name1].mean())
                if abs(diff) <= diff_floor:
                    diff = 0.0
                row.update({
                    'meandiff': diff,
                    'lower': diff,
                    'upper': diff,
                    'p_adj': np.nan if diff == 0.0 else 0.0,
                })
            row['reject'] = bool(row['p_adj'] < alpha)

        comparisons.append(row)

    return pd.DataFrame(comparisons)


def print_group_summary(summary_df: pd.DataFrame) -> None:
    """Print summary statistics by group."""
    print("\n" + "-" * 60)
    print("SUMMARY STATISTICS BY GROUP")
    print("-" * 60)
    print(summary_df.round(2).to_string())


def print_anova_results(result: dict) -> None:
    """Print ANOVA results in readable format."""
    print("\n" + "-" * 60)
    print(f"ONE-WAY ANOVA ({result['response']} ~ {result['factor']})")
    print("-" * 60)

    if not result['defined']:
        print(f"\nANOVA undefined: {result['reason']} "
              f"({result['n_groups']} non-empty groups, {result['n_total']:,} records)")
        return

    print(anova_table(result).to_string(float_format=lambda v: f"{v:.4g}"))
    print(f"\n  F-statistic: {result['f_statistic']:.2f}")
    print(f"  p-value: {result['p_value']:.2e} {result['sig_marker']}")
    print(f"  Effect size (eta^2): {result['eta_squared']:.3f} ({result['effect_size']})")


def print_tukey_results(tukey_df: pd.DataFrame, alpha: float = None) -> None:
    """Print Tukey HSD comparisons in readable format."""
    if alpha is None:
        alpha = config.TUKEY_ALPHA

    print("\n" + "-" * 60)
    print(f"TUKEY HSD POST-HOC TEST ({(1 - alpha) * 100:.0f}% family-wise confidence)")
    print("-" * 60)

    for _, row in tukey_df.iterrows():
        if pd.isna(row['meandiff']):
            print(f"  {row['group2']}-{row['group1']}: not testable")
            continue
        marker = config.get_significance_marker(row['p_adj'])
        print(f"  {row['group2']}-{row['group1']}: diff={row['meandiff']:,.2f} "
              f"[{row['lower']:,.2f}, {row['upper']:,.2f}] p adj={row['p_adj']:.4f} {marker}")
