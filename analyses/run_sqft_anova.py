#!/usr/bin/env python3
"""
Square Footage ANOVA Script
===========================

Tests whether listing price differs across square footage tertiles
(Low / Medium / High) using one-way ANOVA followed by Tukey HSD.

Parameters:
    data_file    - Path to input CSV
    output_base  - Base directory for dated outputs
    percentile   - Outlier cap quantile for price and square footage
    probs        - Inner quantiles for the square footage groups
    labels       - Group labels, lowest first
    alpha        - Family-wise significance level for Tukey HSD

Outputs:
    - Price histogram, box plot by group, sqft vs price scatter (PNG)
    - Filtered data, group summary, ANOVA table, Tukey table (CSV)
    - Text report (TXT)
"""

import argparse
import sys
from pathlib import Path

# Hybrid import: works both when pip-installed and when run directly
try:
    from housing_core import data, stats, viz, output, config
except ImportError:
    sys.path.insert(0, str(Path(__file__).parent.parent))
    from housing_core import data, stats, viz, output, config

import warnings
warnings.filterwarnings('ignore')

# =============================================================================
# PARAMETERS
# =============================================================================
DEFAULTS = {
    'data_file': config.DEFAULT_DATA_FILE,
    'output_base': config.DEFAULT_OUTPUT_BASE,
    'percentile': config.OUTLIER_PERCENTILE,
    'probs': config.TERTILE_PROBS,
    'labels': config.GROUP_LABELS,
    'alpha': config.TUKEY_ALPHA,
}

ANALYSIS_NAME = 'sqft-anova'


# =============================================================================
# MAIN ANALYSIS
# =============================================================================
def run_analysis(params: dict) -> dict:
    """Run the square footage ANOVA pipeline."""
    params = {**DEFAULTS, **params}
    labels = list(params['labels'])

    print("=" * 70)
    print("SQUARE FOOTAGE PRICE ANOVA")
    print("=" * 70)

    # Load and prepare data
    print("\n" + "=" * 70)
    print("LOADING DATA")
    print("=" * 70)

    df = data.load_csv(params['data_file'])
    df = data.rename_columns(df)
    data.require_columns(df)
    df = data.coerce_numeric_columns(df)
    df_filtered, caps = data.cap_outliers(df, percentile=params['percentile'])
    df_grouped, boundaries = data.create_sqft_groups(
        df_filtered, probs=params['probs'], labels=labels
    )

    distribution = data.group_distribution(df_grouped, labels=labels)
    print("\n--- SQFT Group Distribution ---")
    print(distribution.to_string())

    # Figures
    print("\n" + "=" * 70)
    print("VISUALIZATIONS")
    print("=" * 70)

    viz.setup_style()
    figures = {
        'price-histogram': viz.plot_price_histogram(df_grouped, percentile=params['percentile']),
        'boxplot-sqft-group': viz.plot_price_by_group(df_grouped, labels=labels),
        'scatter-sqft-price': viz.plot_sqft_vs_price(df_grouped),
    }

    # Statistics
    print("\n" + "=" * 70)
    print("ANOVA RESULTS")
    print("=" * 70)

    anova = stats.run_anova(df_grouped, labels=labels)
    table = stats.anova_table(anova)
    stats.print_anova_results(anova)

    tukey = stats.run_tukey_hsd(df_grouped, labels=labels, alpha=params['alpha'])
    stats.print_tukey_results(tukey, alpha=params['alpha'])

    summary = stats.summarize_groups(df_grouped, labels=labels)
    stats.print_group_summary(summary)

    results = {
        'data': df_grouped,
        'caps': caps,
        'boundaries': boundaries,
        'distribution': distribution,
        'summary': summary,
        'anova': anova,
        'anova_table': table,
        'tukey': tukey,
    }

    report = generate_report(results, params)

    print("\n" + "=" * 70)
    print("SAVING OUTPUTS")
    print("=" * 70)

    output_dir = output.run_directory(ANALYSIS_NAME, params['output_base'])
    output.save_outputs(results, output_dir, figures=figures, report=report)
    results['output_dir'] = output_dir

    print("\n" + "=" * 70)
    print("ANALYSIS COMPLETE")
    print("=" * 70)
    output.print_files(output_dir)

    return results


def generate_report(results: dict, params: dict) -> str:
    """Generate text report."""
    anova = results['anova']
    boundaries = results['boundaries']

    lines = [
        "=" * 70,
        "SQUARE FOOTAGE PRICE ANOVA REPORT",
        "=" * 70,
        "",
        "CONFIGURATION",
        "-" * 50,
        f"Data file: {params['data_file']}",
        f"Outlier cap percentile: {params['percentile']}",
        f"Group quantiles: 0, {', '.join(str(p) for p in params['probs'])}, 1",
        f"Tukey family-wise alpha: {params['alpha']}",
        "",
        "DATA",
        "-" * 50,
        f"Records after outlier cap: {len(results['data']):,}",
    ]
    for col, cap in results['caps'].items():
        lines.append(f"  {col} cap: {cap:,.2f}")
    lines.append(f"Group edges: {', '.join(f'{b:,.2f}' for b in boundaries)}")
    lines.extend(["", "GROUP DISTRIBUTION", "-" * 50, results['distribution'].to_string(), ""])

    lines.extend(["ANOVA", "-" * 50])
    if anova['defined']:
        lines.extend([
            results['anova_table'].to_string(),
            "",
            f"F({anova['df_between']}, {anova['df_within']}) = {anova['f_statistic']:.2f}, "
            f"p = {anova['p_value']:.2e} {anova['sig_marker']}",
            f"Effect size (eta^2): {anova['eta_squared']:.3f} ({anova['effect_size']})",
            f"Result: {'significant' if anova['significant'] else 'not significant'} "
            f"difference in mean price across groups",
        ])
    else:
        lines.append(f"ANOVA undefined: {anova['reason']}")

    lines.extend(["", "TUKEY HSD", "-" * 50, results['tukey'].to_string(index=False)])

    sig_pairs = results['tukey'][results['tukey']['reject']]
    if len(sig_pairs) > 0:
        lines.append("\nPairs with significantly different means:")
        for _, row in sig_pairs.iterrows():
            lines.append(f"  - {row['group2']} vs {row['group1']}: diff={row['meandiff']:,.2f} "
                         f"(p adj={row['p_adj']:.4f})")

    lines.extend([
        "",
        "SUMMARY STATISTICS BY GROUP",
        "-" * 50,
        results['summary'].round(2).to_string(),
        "",
        "=" * 70,
    ])

    return "\n".join(lines)


def parse_args(argv: list[str] = None) -> dict:
    """Parse command-line overrides into a params dict."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--data-file', default=DEFAULTS['data_file'])
    parser.add_argument('--output-base', default=DEFAULTS['output_base'])
    parser.add_argument('--percentile', type=float, default=DEFAULTS['percentile'])
    parser.add_argument('--alpha', type=float, default=DEFAULTS['alpha'])
    args = parser.parse_args(argv)
    return {**DEFAULTS, **vars(args)}


# =============================================================================
# ENTRY POINT
# =============================================================================
if __name__ == '__main__':
    params = parse_args()
    results = run_analysis(params)
