"""
Tests for chisq_test() against scipy.stats.chi2_contingency, which
reproduces R chisq.test() for tables without tiny deviations.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import stats as sp_stats

from pyposthoc.core.exceptions import ValidationError
from pyposthoc.hypothesis import chisq_test


TABLE_2X2 = np.array([[12, 5], [3, 10]])


class TestChisqStatistic:

    def test_rxc_matches_scipy(self, association_table):
        result = chisq_test(association_table)
        stat, p, dof, expected = sp_stats.chi2_contingency(association_table)
        assert result.statistic == pytest.approx(stat, rel=1e-10)
        assert result.p_value == pytest.approx(p, rel=1e-10)
        assert result.parameter["df"] == dof
        assert_allclose(result.expected, expected, rtol=1e-12)

    def test_2x2_yates(self):
        result = chisq_test(TABLE_2X2)
        stat, p, _, _ = sp_stats.chi2_contingency(TABLE_2X2, correction=True)
        assert result.statistic == pytest.approx(stat, rel=1e-10)
        assert result.p_value == pytest.approx(p, rel=1e-10)
        assert "Yates" in result.method

    def test_2x2_uncorrected(self):
        result = chisq_test(TABLE_2X2, correct=False)
        stat, p, _, _ = sp_stats.chi2_contingency(TABLE_2X2, correction=False)
        assert result.statistic == pytest.approx(stat, rel=1e-10)
        assert result.p_value == pytest.approx(p, rel=1e-10)
        assert result.method == "Pearson's Chi-squared test"

    def test_correction_ignored_beyond_2x2(self, association_table):
        a = chisq_test(association_table, correct=True)
        b = chisq_test(association_table, correct=False)
        assert a.statistic == b.statistic


class TestChisqResiduals:

    def test_stdres_squared_equals_statistic_for_2x2(self):
        result = chisq_test(TABLE_2X2, correct=False)
        assert_allclose(result.stdres ** 2, result.statistic, rtol=1e-10)

    def test_pearson_residuals(self, association_table):
        result = chisq_test(association_table)
        resid = result.extras["residuals"]
        assert np.sum(resid ** 2) == pytest.approx(result.statistic, rel=1e-10)

    def test_stdres_sign_follows_deviation(self, association_table):
        result = chisq_test(association_table)
        deviation = association_table - result.expected
        assert np.all(np.sign(result.stdres) == np.sign(deviation))


class TestChisqWarnings:

    def test_small_expected_warns(self):
        result = chisq_test([[1, 2], [3, 1]])
        assert result._result.has_warning("approximation may be incorrect")

    def test_large_counts_no_warning(self):
        result = chisq_test([[50, 30], [20, 60]])
        assert result.warnings == ()


class TestChisqValidation:

    def test_zero_row(self):
        with pytest.raises(ValidationError, match="all-zero"):
            chisq_test([[0, 0], [3, 4]])

    def test_zero_column(self):
        with pytest.raises(ValidationError, match="all-zero"):
            chisq_test([[0, 2], [0, 4]])

    def test_too_small(self):
        with pytest.raises(ValidationError):
            chisq_test([[1, 2]])
