"""
Global Configuration for the Square-Footage Price Analysis
==========================================================

Central location for default parameters used across the analysis modules.
Override these per call (keyword arguments) or in the pipeline script's
DEFAULTS dictionary as needed.
"""

# =============================================================================
# DATA CONFIGURATION
# =============================================================================
DEFAULT_DATA_FILE = 'NY-House-Dataset.csv'

# Raw CSV header -> analysis column names
COLUMN_RENAMES = {
    'PRICE': 'Price',
    'PROPERTYSQFT': 'PropertySQFT',
}

PRICE_COL = 'Price'             # Listing price (USD)
SQFT_COL = 'PropertySQFT'       # Property area (sq ft)
GROUP_COL = 'SQFT_Group'        # Derived square footage category

REQUIRED_COLUMNS = [PRICE_COL, SQFT_COL]

# Formatting characters stripped before numeric parsing
NUMERIC_STRIP_CHARS = r'[$,]'

# =============================================================================
# CLEANING / GROUPING CONFIGURATION
# =============================================================================
OUTLIER_PERCENTILE = 0.99       # Rows above this quantile are dropped
CAPPED_COLUMNS = [PRICE_COL, SQFT_COL]

# Inner quantile cut points; 0 and 1 are always added
TERTILE_PROBS = (0.33, 0.66)
GROUP_LABELS = ('Low', 'Medium', 'High')

# =============================================================================
# STATISTICS CONFIGURATION
# =============================================================================
SIGNIFICANCE_LEVEL = 0.05
TUKEY_ALPHA = 0.05              # Family-wise error rate for Tukey HSD

# =============================================================================
# OUTPUT CONFIGURATION
# =============================================================================
DEFAULT_OUTPUT_BASE = 'outputs'
DEFAULT_DPI = 150
HISTOGRAM_BINS = 50

# =============================================================================
# EFFECT SIZE INTERPRETATION LABELS
# =============================================================================
ETA_SQUARED_THRESHOLDS = {
    0.14: "Large",
    0.06: "Medium",
    0.01: "Small",
    0.0: "Negligible",
}

SIGNIFICANCE_MARKERS = {
    0.001: "***",
    0.01: "**",
    0.05: "*",
}


def get_effect_size_label(eta_squared: float) -> str:
    """Return human-readable eta-squared interpretation."""
    for threshold, label in sorted(ETA_SQUARED_THRESHOLDS.items(), reverse=True):
        if eta_squared >= threshold:
            return label
    return "Undefined"


def get_significance_marker(p_value: float) -> str:
    """Return R-style significance stars for a p-value."""
    for threshold, marker in sorted(SIGNIFICANCE_MARKERS.items()):
        if p_value < threshold:
            return marker
    return ""
