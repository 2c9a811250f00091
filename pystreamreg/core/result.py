"""
Generic result container for PyStreamReg computations.

Every regression run is packaged in the same envelope: the domain payload,
a metadata dict, optional timing and the non-fatal warnings raised while
computing it. Payloads stay domain specific; the envelope does not.

Design decisions:
    - Generic over parameter payload P
    - info dict for flexible metadata (method, rank, dependent columns)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True): a regression on a streaming state is a
      snapshot, later observations must not leak into it
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (coefficients, covariance, ...)
        info: Structured metadata (method, rank, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the algorithm that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=RegressionParams(...),
        ...     info={'method': 'as274', 'rank': 3},
        ...     timing={'total_seconds': 0.001, 'regcf': 0.0002},
        ...     backend_name='cpu_as274',
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
