"""
CPU backend for contingency-table hypothesis tests.

Dispatches to test-specific submodules based on design.test_type.
"""

from __future__ import annotations

from pyposthoc.core.result import Result
from pyposthoc.core.compute.timing import Timer
from pyposthoc.hypothesis._common import HTestParams
from pyposthoc.hypothesis.design import HypothesisDesign
from pyposthoc.hypothesis.backends._chisq_test import chisq_independence
from pyposthoc.hypothesis.backends._fisher_test import fisher_2x2, fisher_mc

_DISPATCH = {
    "fisher_2x2": fisher_2x2,
    "fisher_mc": fisher_mc,
    "chisq_independence": chisq_independence,
}


class CPUHypothesisBackend:
    """CPU backend for hypothesis tests."""

    @property
    def name(self) -> str:
        return 'cpu_hypothesis'

    def solve(self, design: HypothesisDesign) -> Result[HTestParams]:
        """Dispatch to the implementation for design.test_type."""
        test_type = design.test_type
        impl = _DISPATCH.get(test_type)
        if impl is None:
            raise ValueError(f"Unknown test_type: {test_type!r}")

        timer = Timer()
        timer.start()

        with timer.section(test_type):
            params, warnings_list = impl(design)

        timer.stop()

        info = {'test_type': test_type, 'shape': design.table.shape}
        if test_type == "fisher_mc":
            info['n_sim'] = design.n_sim
            info['burnin'] = design.burnin

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
