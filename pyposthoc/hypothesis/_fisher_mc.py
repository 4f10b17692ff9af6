"""
Monte Carlo engine for Fisher's exact test on r x c tables.

The p-value is estimated with a margins-preserving Markov chain: each
step picks two rows and two columns and moves k units around the 2x2
sub-table they span (a += k, b -= k, c -= k, d += k). Row and column
totals never change, so the chain walks the reference set of Fisher's
test.

A table is at least as extreme as the observed one when its sum of
log-factorials, sum(log(n_ij!)), is >= the observed value. Under fixed
margins P(T) is proportional to 1 / prod(n_ij!), so a larger sum means a
less probable table.

Caveat: k is drawn uniformly and every proposed move is accepted, so the
chain's stationary distribution is uniform over the tables with the
observed margins, not the hypergeometric null of Fisher's test. Tables
far from independence are over-represented among the samples, which
inflates the count of extreme tables and leaves the test with little
power. A strongly associated table can still receive a large p-value.

Random numbers are drawn in chunks of `DEFAULT_CHUNK_SIZE` steps, so
memory does not grow with n_sim.

This is a standalone engine (no Design/Backend pipeline); the
fisher_test() dispatcher wraps it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats as sp_stats
from scipy.special import gammaln

from pyposthoc.core.exceptions import ValidationError
from pyposthoc.core.validation import check_count_table, check_probability

DEFAULT_N_SIM = 100_000
DEFAULT_BURNIN = 10_000
DEFAULT_TOL = 1e-10
DEFAULT_CHUNK_SIZE = 65_536


@dataclass(frozen=True)
class FisherMCState:
    """
    Observed table and its extremeness threshold.

    Attributes
    ----------
    table : ndarray of int64
        The observed table. Never modified; simulations run on a copy.
    log_prob_obs : float
        sum(log Gamma(n_ij + 1)) over the observed cells.
    """
    table: NDArray[np.int64]
    log_prob_obs: float

    @classmethod
    def from_table(cls, table: ArrayLike) -> FisherMCState:
        """
        Validate an r x c count table and compute its threshold.

        Raises
        ------
        ValidationError
            If the table has fewer than 2 rows or 2 columns, or holds
            negative or non-integer counts.
        """
        tbl = check_count_table(table, "table")
        if tbl.shape[0] < 2 or tbl.shape[1] < 2:
            raise ValidationError(
                f"table: needs at least 2 rows and 2 columns, got shape {tbl.shape}"
            )
        tbl.setflags(write=False)
        return cls(table=tbl, log_prob_obs=_log_factorial_sum(tbl))

    @property
    def shape(self) -> tuple[int, int]:
        return self.table.shape

    @property
    def total(self) -> int:
        return int(self.table.sum())


def perform_swap(table: NDArray[np.int64], rng: np.random.Generator) -> int:
    """
    One Markov chain step, in place.

    Picks r1 != r2 and c1 != c2 uniformly at random and draws k uniformly
    from [-min(a, d), min(b, c)], where a, b, c, d are the cells at
    (r1, c1), (r1, c2), (r2, c1), (r2, c2). When that range holds a single
    value the table is left unchanged.

    Parameters
    ----------
    table : ndarray of int
        Table with at least 2 rows and 2 columns. Modified in place.
    rng : numpy.random.Generator
        Source of randomness.

    Returns
    -------
    int
        The shift k that was applied (0 for a no-op step).
    """
    n_rows, n_cols = table.shape
    r1, r2 = _distinct_pair(rng, n_rows)
    c1, c2 = _distinct_pair(rng, n_cols)
    return _apply_swap(table, r1, r2, c1, c2, rng.random())


def simulate_extreme_count(
    state: FisherMCState,
    n_sim: int = DEFAULT_N_SIM,
    burnin: int = DEFAULT_BURNIN,
    rng: np.random.Generator | None = None,
    tol: float = DEFAULT_TOL,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Run the chain and count sampled tables at least as extreme as observed.

    The chain starts from a private copy of the observed table. The first
    `burnin` steps are discarded; each of the following `n_sim` steps is
    counted when sum(log(n_ij!)) >= log_prob_obs - tol.

    Parameters
    ----------
    state : FisherMCState
        Observed table and threshold.
    n_sim : int
        Number of counted steps. Must be >= 0.
    burnin : int
        Number of discarded warm-up steps. Must be >= 0.
    rng : numpy.random.Generator or None
        Source of randomness. None creates an unseeded generator.
    tol : float
        Tolerance on the extremeness comparison.
    chunk_size : int
        Number of steps whose random numbers are drawn at once. Bounds
        memory use independently of n_sim. Must be >= 1.

    Returns
    -------
    int
        Number of extreme tables, in [0, n_sim].
    """
    n_sim = _check_steps(n_sim, "n_sim")
    burnin = _check_steps(burnin, "burnin")
    chunk_size = _check_steps(chunk_size, "chunk_size")
    if chunk_size < 1:
        raise ValidationError(f"chunk_size must be >= 1, got {chunk_size}")
    if rng is None:
        rng = np.random.default_rng()

    current = state.table.copy()
    n_rows, n_cols = current.shape
    n_steps = burnin + n_sim

    log_fact = gammaln(np.arange(state.total + 1) + 1.0)
    threshold = state.log_prob_obs - tol

    count = 0
    for start in range(0, n_steps, chunk_size):
        size = min(chunk_size, n_steps - start)
        # the chain is sequential; only its random numbers are drawn in bulk
        rows1, rows2 = _distinct_pairs(rng, n_rows, size)
        cols1, cols2 = _distinct_pairs(rng, n_cols, size)
        shifts = rng.random(size)

        for i in range(size):
            _apply_swap(current, rows1[i], rows2[i], cols1[i], cols2[i], shifts[i])
            if start + i < burnin:
                continue
            if float(log_fact[current].sum()) >= threshold:
                count += 1

    return count


def mc_p_value(count: int, n_sim: int) -> float:
    """
    Add-one Monte Carlo p-value, (count + 1) / (n_sim + 1).

    Always > 0. Equals 1 when every sampled table was extreme.
    """
    return (count + 1) / (n_sim + 1)


def mc_conf_int(count: int, n_sim: int, conf_level: float = 0.95) -> tuple[float, float]:
    """
    Normal-approximation interval for the Monte Carlo p-value estimate.

    Uses p_hat = (count + 1) / (n_sim + 1) and
    se = sqrt(p_hat * (1 - p_hat) / (n_sim + 1)), clamped to [0, 1].

    This interval describes the simulation error of the p-value estimate
    only. It is not a confidence interval for any effect size.
    """
    conf_level = check_probability(conf_level, "conf_level")
    p_hat = mc_p_value(count, n_sim)
    se = np.sqrt(p_hat * (1.0 - p_hat) / (n_sim + 1))
    z = sp_stats.norm.ppf(1.0 - (1.0 - conf_level) / 2.0)
    margin = z * se
    return (max(0.0, p_hat - margin), min(1.0, p_hat + margin))


def _log_factorial_sum(table: NDArray[Any]) -> float:
    """sum(log(n_ij!)) over all cells."""
    return float(gammaln(table + 1.0).sum())


def _check_steps(value: int, name: str) -> int:
    if int(value) != value or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer, got {value}")
    return int(value)


def _distinct_pair(rng: np.random.Generator, n: int) -> tuple[int, int]:
    """Two distinct indices drawn uniformly from range(n)."""
    i = int(rng.integers(n))
    j = int(rng.integers(n - 1))
    if j >= i:
        j += 1
    return i, j


def _distinct_pairs(
    rng: np.random.Generator, n: int, size: int,
) -> tuple[NDArray[np.int64], NDArray[np.int64]]:
    """Vectorised _distinct_pair."""
    first = rng.integers(n, size=size)
    second = rng.integers(n - 1, size=size)
    second = second + (second >= first)
    return first, second


def _apply_swap(
    table: NDArray[np.int64],
    r1: int, r2: int, c1: int, c2: int,
    u: float,
) -> int:
    """Move k units around the (r1, r2) x (c1, c2) sub-table; k from uniform u."""
    a = table[r1, c1]
    b = table[r1, c2]
    c = table[r2, c1]
    d = table[r2, c2]

    min_k = -min(a, d)
    max_k = min(b, c)
    if min_k >= max_k:
        return 0

    k = int(min_k + int(u * (max_k - min_k + 1)))
    if k != 0:
        table[r1, c1] = a + k
        table[r1, c2] = b - k
        table[r2, c1] = c - k
        table[r2, c2] = d + k
    return k
