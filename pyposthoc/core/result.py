"""
Generic result container for all PyPostHoc computations.

The Result class provides a standardized envelope that all domain-specific
results use. Domains define their own frozen parameter payloads; the
envelope carries timing, metadata and non-fatal diagnostics.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (test type, simulation sizes)
    - warnings carry advisory conditions instead of a logging side channel
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (statistics, comparisons, etc.)
        info: Structured metadata (method, test type, simulation sizes)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=PostHocParams(...),
        ...     info={'method': 'tukey', 'n_groups': 3},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_posthoc'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
