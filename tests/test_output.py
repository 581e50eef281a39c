"""Unit tests for run folders and output writing."""
from __future__ import annotations

from datetime import date

import matplotlib.pyplot as plt
import pandas as pd

from housing_core import output


class TestRunDirectory:
    """Test dated run folder creation."""

    def test_creates_dated_directory(self, tmp_path):
        """Test {base}/{DATE}-{analysis} is created."""
        folder = output.run_directory('sqft-anova', str(tmp_path))
        assert folder.is_dir()
        assert folder.name == f"{date.today().isoformat()}-sqft-anova"

    def test_explicit_date(self, tmp_path):
        """Test the folder can be stamped with a given date."""
        folder = output.run_directory('sqft-anova', str(tmp_path), run_date=date(2024, 3, 9))
        assert folder.name == '2024-03-09-sqft-anova'

    def test_existing_directory_reused(self, tmp_path):
        """Test calling twice does not fail."""
        first = output.run_directory('sqft-anova', str(tmp_path))
        second = output.run_directory('sqft-anova', str(tmp_path))
        assert first == second

    def test_artefact_path(self, tmp_path):
        """Test file names carry the folder prefix."""
        folder = tmp_path / '2024-03-09-sqft-anova'
        path = output.artefact_path(folder, 'tukey', 'csv')
        assert path == folder / '2024-03-09-sqft-anova-tukey.csv'


class TestSaveOutputs:
    """Test writing a run's tables, figures and report."""

    def _results(self):
        summary = pd.DataFrame({'n': [2, 1]}, index=pd.Index(['Low', 'High'], name='SQFT_Group'))
        return {
            'data': pd.DataFrame({'Price': [1.0, 2.0, 3.0]}),
            'tukey': pd.DataFrame({'group1': ['Low'], 'group2': ['High'], 'p_adj': [0.01]}),
            'summary': summary,
            'caps': {'Price': 3.0},
        }

    def test_tables_and_report(self, tmp_path, capsys):
        """Test present tables are written and missing ones skipped."""
        folder = output.run_directory('sqft-anova', str(tmp_path), run_date=date(2024, 3, 9))
        written = output.save_outputs(self._results(), folder, report='ANOVA REPORT')

        assert [p.name for p in written] == [
            '2024-03-09-sqft-anova-filtered-data.csv',
            '2024-03-09-sqft-anova-tukey.csv',
            '2024-03-09-sqft-anova-group-summary.csv',
            '2024-03-09-sqft-anova-report.txt',
        ]
        tukey = pd.read_csv(written[1])
        assert tukey.loc[0, 'group2'] == 'High'
        assert list(pd.read_csv(written[2]).columns) == ['SQFT_Group', 'n']
        assert written[3].read_text() == 'ANOVA REPORT'
        assert capsys.readouterr().out.count('Saved: ') == 4

    def test_figures_closed(self, tmp_path):
        """Test figures are saved as PNG under their key and closed."""
        fig, ax = plt.subplots()
        ax.plot([0, 1], [0, 1])
        written = output.save_outputs({}, tmp_path, figures={'line': fig}, dpi=50)

        assert len(written) == 1
        assert written[0].name == f"{tmp_path.name}-line.png"
        assert written[0].exists()
        assert not plt.fignum_exists(fig.number)

    def test_print_files(self, tmp_path, capsys):
        """Test listing a run folder."""
        output.print_files(tmp_path / 'missing')
        assert 'No files generated' in capsys.readouterr().out

        output.save_outputs({}, tmp_path, report='x')
        output.print_files(tmp_path)
        assert f"{tmp_path.name}-report.txt" in capsys.readouterr().out
