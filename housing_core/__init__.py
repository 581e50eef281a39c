"""
Housing Core Library
====================

Analysis framework for testing whether listing price differs across
square footage tertiles (one-way ANOVA with Tukey HSD).

Modules:
    config  - Global configuration parameters
    data    - Loading, numeric coercion, outlier capping, tertile grouping
    stats   - Group summaries, ANOVA, Tukey HSD
    viz     - Plot style and the diagnostic figures
    output  - Run folder and file writing
"""

from . import config
from . import data
from . import stats
from . import viz
from . import output

__version__ = '1.0.0'

__all__ = [
    'config',
    'data',
    'stats',
    'viz',
    'output',
]
