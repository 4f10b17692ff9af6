"""
Tests for posthoc_test() (parametric pairwise comparisons).

Validates:
    - Tukey HSD against scipy.stats.tukey_hsd
    - Two-group reductions of LSD, Scheffe, Bonferroni, Sidak, SNK, Tamhane
    - Stepwise procedures (SNK, Duncan): monotone decisions, Duncan at
      least as liberal as SNK
    - Levene pre-check warning, pair selection, CLD, DataFrame export
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import stats as sp_stats

from pyposthoc.core.exceptions import ValidationError, DimensionError
from pyposthoc.posthoc import posthoc_test, PostHocSolution, PARAMETRIC_METHODS


@pytest.fixture
def two_groups():
    rng = np.random.default_rng(11)
    return [rng.normal(0.0, 1.0, 12), rng.normal(0.8, 1.5, 15)]


# ═══════════════════════════════════════════════════════════════════════
# Tukey HSD
# ═══════════════════════════════════════════════════════════════════════


class TestTukey:

    def test_p_values_match_scipy(self, unbalanced_groups):
        result = posthoc_test(unbalanced_groups, method="tukey")
        ref = sp_stats.tukey_hsd(*unbalanced_groups)
        for c in result.comparisons:
            assert c.p_value == pytest.approx(
                ref.pvalue[c.group1 - 1, c.group2 - 1], rel=1e-5, abs=1e-10
            )

    def test_intervals_match_scipy(self, unbalanced_groups):
        result = posthoc_test(unbalanced_groups, method="tukey")
        ci = sp_stats.tukey_hsd(*unbalanced_groups).confidence_interval(0.95)
        for c in result.comparisons:
            i, j = c.group1 - 1, c.group2 - 1
            assert c.lower_ci == pytest.approx(ci.low[i, j], rel=1e-5)
            assert c.upper_ci == pytest.approx(ci.high[i, j], rel=1e-5)

    def test_default_method(self, separated_groups):
        assert posthoc_test(separated_groups).method == "tukey"

    def test_all_pairs_in_order(self, unbalanced_groups):
        result = posthoc_test(unbalanced_groups)
        pairs = [(c.group1, c.group2) for c in result.comparisons]
        assert pairs == [(1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4)]

    def test_diff_sign(self, separated_groups):
        c = posthoc_test(separated_groups).comparisons[0]
        assert c.diff < 0
        assert c.lower_ci < c.diff < c.upper_ci


# ═══════════════════════════════════════════════════════════════════════
# Two-group reductions
# ═══════════════════════════════════════════════════════════════════════


class TestTwoGroupReductions:

    def test_lsd_is_pooled_t_test(self, two_groups):
        result = posthoc_test(two_groups, method="lsd")
        ref = sp_stats.ttest_ind(*two_groups, equal_var=True)
        assert result.p_values[0] == pytest.approx(ref.pvalue, rel=1e-10)
        assert result.comparisons[0].statistic == pytest.approx(abs(ref.statistic))

    def test_scheffe_equals_lsd(self, two_groups):
        lsd = posthoc_test(two_groups, method="lsd").p_values[0]
        scheffe = posthoc_test(two_groups, method="scheffe").p_values[0]
        assert scheffe == pytest.approx(lsd, rel=1e-8)

    def test_snk_equals_tukey(self, two_groups):
        tukey = posthoc_test(two_groups, method="tukey").comparisons[0]
        snk = posthoc_test(two_groups, method="snk").comparisons[0]
        assert snk.statistic == pytest.approx(tukey.statistic, rel=1e-8)
        assert snk.p_value == pytest.approx(tukey.p_value, rel=1e-8)

    def test_tamhane_is_welch_t_test(self, two_groups):
        result = posthoc_test(two_groups, method="tamhane")
        ref = sp_stats.ttest_ind(*two_groups, equal_var=False)
        assert result.p_values[0] == pytest.approx(ref.pvalue, rel=1e-8)
        assert result.comparisons[0].note == "Welch+Sidak"


class TestAdjustedSingleStep:

    def test_bonferroni_scales_lsd(self, unbalanced_groups):
        lsd = posthoc_test(unbalanced_groups, method="lsd").p_values
        bonf = posthoc_test(unbalanced_groups, method="bonferroni")
        assert_allclose(bonf.p_values, np.minimum(1.0, lsd * 6), rtol=1e-10)
        assert all(c.note == "m=6" for c in bonf.comparisons)

    def test_sidak_from_lsd(self, unbalanced_groups):
        lsd = posthoc_test(unbalanced_groups, method="lsd").p_values
        sidak = posthoc_test(unbalanced_groups, method="sidak").p_values
        assert_allclose(sidak, 1.0 - (1.0 - lsd) ** 6, rtol=1e-10)

    def test_sidak_not_above_bonferroni(self, unbalanced_groups):
        bonf = posthoc_test(unbalanced_groups, method="bonferroni").p_values
        sidak = posthoc_test(unbalanced_groups, method="sidak").p_values
        assert np.all(sidak <= bonf + 1e-12)

    def test_critical_value_shared(self, unbalanced_groups):
        result = posthoc_test(unbalanced_groups, method="bonferroni", alpha=0.05)
        expected = sp_stats.t.ppf(1 - 0.05 / 12, result.info["df_resid"])
        assert all(
            c.crit_val == pytest.approx(expected) for c in result.comparisons
        )


# ═══════════════════════════════════════════════════════════════════════
# Stepwise procedures
# ═══════════════════════════════════════════════════════════════════════


class TestStepwise:

    @pytest.mark.parametrize("method", ["snk", "duncan"])
    def test_decisions_monotone(self, unbalanced_groups, method):
        """A rejected range implies every range enclosing it is rejected."""
        result = posthoc_test(unbalanced_groups, method=method)
        means = np.array([np.mean(g) for g in unbalanced_groups])
        rank = {int(g) + 1: pos for pos, g in enumerate(np.argsort(means, kind="stable"))}
        spans = {}
        for c in result.comparisons:
            lo, hi = sorted((rank[c.group1], rank[c.group2]))
            spans[(lo, hi)] = c.rejected
        for (lo, hi), rejected in spans.items():
            if not rejected:
                continue
            for (lo2, hi2), rejected2 in spans.items():
                if lo2 <= lo and hi <= hi2:
                    assert rejected2

    @staticmethod
    def _three_shifted_groups(scale_of_q3, method, alpha=0.05):
        """
        Three groups of n=200 sharing one standardized residual vector, so
        mse == 1. The top mean sits at scale_of_q3 times the span-3 critical
        distance; the lower two means are nearly equal.
        """
        n, df = 200, 597
        z = np.random.default_rng(21).normal(size=n)
        z = (z - z.mean()) / z.std(ddof=1)
        level3 = alpha if method == "snk" else 1.0 - (1.0 - alpha) ** 2
        q3 = sp_stats.studentized_range.ppf(1.0 - level3, 3, df)
        top = scale_of_q3 * q3 * np.sqrt(1.0 / n)
        return [0.0 + z, 0.001 + z, top + z]

    @pytest.mark.parametrize("method", ["snk", "duncan"])
    def test_enclosing_range_protects_nested_pair(self, method):
        groups = self._three_shifted_groups(0.99, method)
        result = posthoc_test(groups, method=method)
        by_pair = {(c.group1, c.group2): c for c in result.comparisons}
        assert result.info["mse"] == pytest.approx(1.0)
        assert by_pair[(1, 3)].statistic < by_pair[(1, 3)].crit_val
        assert not by_pair[(1, 3)].rejected
        assert by_pair[(2, 3)].statistic > by_pair[(2, 3)].crit_val
        assert by_pair[(2, 3)].rejected is False

    @pytest.mark.parametrize("method", ["snk", "duncan"])
    def test_nested_pair_rejected_when_enclosing_range_is(self, method):
        groups = self._three_shifted_groups(1.2, method)
        result = posthoc_test(groups, method=method)
        by_pair = {(c.group1, c.group2): c for c in result.comparisons}
        assert by_pair[(1, 3)].rejected
        assert by_pair[(2, 3)].rejected
        assert not by_pair[(1, 2)].rejected

    def test_duncan_at_least_as_liberal(self, unbalanced_groups):
        snk = posthoc_test(unbalanced_groups, method="snk").rejected
        duncan = posthoc_test(unbalanced_groups, method="duncan").rejected
        assert np.all(duncan[snk])

    def test_span_notes(self, separated_groups):
        result = posthoc_test(separated_groups, method="snk")
        notes = {(c.group1, c.group2): c.note for c in result.comparisons}
        assert notes[(1, 3)] == "Span=3"
        assert notes[(1, 2)] == "Span=2"
        assert notes[(2, 3)] == "Span=2"

    def test_subset_of_pairs(self, unbalanced_groups):
        full = posthoc_test(unbalanced_groups, method="snk")
        sub = posthoc_test(unbalanced_groups, method="snk", pairs=[(4, 1)])
        assert len(sub.comparisons) == 1
        c = sub.comparisons[0]
        assert (c.group1, c.group2) == (1, 4)
        ref = next(x for x in full.comparisons if (x.group1, x.group2) == (1, 4))
        assert c.rejected == ref.rejected


# ═══════════════════════════════════════════════════════════════════════
# Common behaviour
# ═══════════════════════════════════════════════════════════════════════


class TestPosthocCommon:

    @pytest.mark.parametrize("method", PARAMETRIC_METHODS)
    def test_clear_differences_rejected(self, separated_groups, method):
        result = posthoc_test(separated_groups, method=method)
        assert isinstance(result, PostHocSolution)
        assert result.rejected.all()
        assert np.all((result.p_values >= 0) & (result.p_values <= 1))

    def test_pair_orientation_kept(self, separated_groups):
        result = posthoc_test(separated_groups, method="lsd", pairs=[(3, 1)])
        c = result.comparisons[0]
        assert (c.group1, c.group2) == (3, 1)
        assert c.diff > 0

    def test_mse_is_pooled_variance(self, unbalanced_groups):
        result = posthoc_test(unbalanced_groups)
        ss = sum(np.sum((g - np.mean(g)) ** 2) for g in unbalanced_groups)
        n = sum(len(g) for g in unbalanced_groups)
        assert result.info["mse"] == pytest.approx(ss / (n - 4))
        assert result.info["df_resid"] == n - 4

    def test_levene_warning(self, heteroscedastic_groups):
        result = posthoc_test(heteroscedastic_groups, method="tukey")
        assert result.info["levene_p_value"] < 0.05
        assert any("method='tamhane'" in w for w in result.warnings)

    def test_no_levene_warning(self, separated_groups):
        result = posthoc_test(separated_groups, alpha_levene=1e-6)
        assert result.warnings == ()

    def test_cld_letters(self, separated_groups):
        result = posthoc_test(separated_groups, cld=True)
        assert result.cld_letters == {1: "c", 2: "b", 3: "a"}
        assert "Compact letter display" in result.summary()

    def test_no_cld_by_default(self, separated_groups):
        result = posthoc_test(separated_groups)
        assert result.cld_letters == {}

    def test_labels_in_exports(self, separated_groups):
        result = posthoc_test(
            separated_groups, cld=True, labels=["low", "mid", "high"],
        )
        df = result.to_dataframe()
        assert list(df.columns) == [
            "Contrast", "Diff", "StdErr", "Stat", "Critical",
            "P-value", "LowerCI", "UpperCI", "Sig", "Note",
        ]
        assert df["Contrast"].iloc[0] == "low - mid"
        assert (df["Sig"] == "*").all()

        cld = result.cld_dataframe()
        assert list(cld["GroupLabel"]) == ["low", "mid", "high"]
        assert list(cld["CLD"]) == ["c", "b", "a"]

    def test_repr(self, separated_groups):
        text = repr(posthoc_test(separated_groups))
        assert "n_comparisons=3" in text
        assert "n_rejected=3" in text


class TestPosthocValidation:

    def test_unknown_method(self, separated_groups):
        with pytest.raises(ValidationError, match="Unknown method"):
            posthoc_test(separated_groups, method="games_howell")

    @pytest.mark.parametrize("alpha", [0.0, 1.0, -0.1])
    def test_alpha_range(self, separated_groups, alpha):
        with pytest.raises(ValidationError, match="alpha"):
            posthoc_test(separated_groups, alpha=alpha)

    def test_singleton_group(self):
        with pytest.raises(ValidationError, match="at least 2 samples"):
            posthoc_test([[1.0, 2.0], [3.0]])

    def test_single_group(self):
        with pytest.raises(ValidationError):
            posthoc_test([[1.0, 2.0, 3.0]])

    def test_pair_out_of_range(self, separated_groups):
        with pytest.raises(ValidationError, match="1-based"):
            posthoc_test(separated_groups, pairs=[(0, 1)])

    def test_pair_same_group(self, separated_groups):
        with pytest.raises(ValidationError):
            posthoc_test(separated_groups, pairs=[(2, 2)])

    def test_tamhane_zero_variance(self):
        with pytest.raises(ValidationError, match="zero variance"):
            posthoc_test([[1.0, 2.0, 3.0], [4.0, 4.0, 4.0]], method="tamhane")

    @pytest.mark.parametrize("method", PARAMETRIC_METHODS)
    def test_constant_groups(self, method):
        groups = [[1, 1, 1], [2, 2, 2], [3, 3, 3]]
        with pytest.raises(ValidationError, match="pooled within-group variance"):
            posthoc_test(groups, method=method)

    def test_one_constant_group_allowed(self):
        result = posthoc_test([[1.0, 2.0, 3.0], [4.0, 4.0, 4.0]], method="lsd")
        assert np.isfinite(result.comparisons[0].statistic)

    def test_label_count(self, separated_groups):
        with pytest.raises(DimensionError):
            posthoc_test(separated_groups, labels=["a"])


class TestPosthocExports:

    @pytest.mark.parametrize("method", ["tukey", "snk", "tamhane"])
    def test_long_frame_has_all_pairs(self, unbalanced_groups, method):
        df = posthoc_test(unbalanced_groups, method=method).to_dataframe()
        assert len(df) == 6

    @pytest.mark.parametrize("method", PARAMETRIC_METHODS)
    def test_cld_never_joins_rejected_pairs(self, unbalanced_groups, method):
        result = posthoc_test(unbalanced_groups, method=method, cld=True)
        letters = result.cld_letters
        assert set(letters) == {1, 2, 3, 4}
        for c in result.comparisons:
            if c.rejected:
                assert not set(letters[c.group1]) & set(letters[c.group2])
