"""
Run Output Module
=================

Writes the artefacts of one pipeline run into a folder of their own:

    {base}/{DATE}-{analysis}/{DATE}-{analysis}-{suffix}.{ext}

e.g. outputs/2026-10-17-sqft-anova/2026-10-17-sqft-anova-tukey.csv

The folder and every file name are derived from explicit arguments; the
process working directory is never touched.
"""

from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd
import matplotlib.pyplot as plt

from . import config


# results key -> (file suffix, write the index)
RESULT_TABLES = {
    'data': ('filtered-data', False),
    'anova_table': ('anova', True),
    'tukey': ('tukey', False),
    'summary': ('group-summary', True),
}


def run_directory(analysis_name: str, base: str = None, run_date: Optional[date] = None) -> Path:
    """
    Create (if needed) and return the folder for one run of an analysis.

    Parameters:
        analysis_name: Lowercase-hyphen analysis name, e.g. 'sqft-anova'
        base: Parent folder. Defaults to config.DEFAULT_OUTPUT_BASE
        run_date: Date stamp for the folder name. Defaults to today

    Returns:
        Path to {base}/{DATE}-{analysis_name}
    """
    if base is None:
        base = config.DEFAULT_OUTPUT_BASE
    stamp = (run_date or date.today()).isoformat()

    folder = Path(base) / f"{stamp}-{analysis_name}"
    folder.mkdir(parents=True, exist_ok=True)
    print(f"Output directory: {folder}")
    return folder


def artefact_path(folder: Path, suffix: str, ext: str) -> Path:
    """File path inside a run folder, prefixed with the folder's own name."""
    folder = Path(folder)
    return folder / f"{folder.name}-{suffix}.{ext}"


def save_outputs(
    results: dict,
    folder: Path,
    figures: dict[str, plt.Figure] = None,
    report: str = None,
    dpi: int = None
) -> list[Path]:
    """
    Write the tables, figures and report of a run.

    Tables are taken from results by the keys in RESULT_TABLES; keys that
    are missing are skipped. Figures are saved as PNG under their dict key
    and closed afterwards.

    Parameters:
        results: Output of run_analysis()
        folder: Run folder from run_directory()
        figures: {suffix: Figure} to save as PNG
        report: Text report, saved with the suffix 'report'
        dpi: PNG resolution. Defaults to config.DEFAULT_DPI

    Returns:
        Paths written, in write order
    """
    if dpi is None:
        dpi = config.DEFAULT_DPI

    written = []
    for key, (suffix, index) in RESULT_TABLES.items():
        table = results.get(key)
        if table is None:
            continue
        path = artefact_path(folder, suffix, 'csv')
        pd.DataFrame(table).to_csv(path, index=index)
        written.append(path)

    for suffix, fig in (figures or {}).items():
        path = artefact_path(folder, suffix, 'png')
        fig.savefig(path, dpi=dpi, bbox_inches='tight', facecolor='white')
        plt.close(fig)
        written.append(path)

    if report is not None:
        path = artefact_path(folder, 'report', 'txt')
        path.write_text(report)
        written.append(path)

    for path in written:
        print(f"Saved: {path}")
    return written


def print_files(folder: Path) -> None:
    """Print the files present in a run folder."""
    folder = Path(folder)
    names = sorted(p.name for p in folder.iterdir()) if folder.is_dir() else []
    if not names:
        print(f"\nNo files generated in {folder}")
        return

    print(f"\nFiles generated in {folder}:")
    for name in names:
        print(f"  - {name}")
