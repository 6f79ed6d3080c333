"""Per-axis stepping state and the odometer over all axes."""

import math
import warnings
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Sequence, Tuple

import torch
from torch import Tensor

from torchapprox.quadrature._exceptions import QuadratureWarning
from torchapprox.quadrature._numeric import divide
from torchapprox.quadrature._policy import (
    QuadraturePolicy,
    resolve_policies,
)
from torchapprox.quadrature._range import IntegrationRange, as_ranges

DEFAULT_MAX_POINTS = 10_000_000


@dataclass
class DimensionState:
    """
    Mutable stepping record of one integration variable.

    The tensor fields are 0-d tensors of the variable's dtype. ``start`` is the
    first sample point (the policy's initial offset), which is also where
    ``current`` returns to when the axis wraps. ``compensation`` carries the
    Kahan correction of floating point axes and stays zero on integer axes.
    ``index`` counts the points visited since the last wrap; the axis wraps
    after ``points`` of them even if rounding or a truncated integer step
    keeps ``current`` short of the boundary.
    """

    current: Tensor
    start: Tensor
    stop: Tensor
    step_size: Tensor
    compensation: Tensor
    points: int
    reached_boundary: Callable[[Tensor, Tensor], Tensor] = field(repr=False)
    index: int = 0

    @classmethod
    def from_range(
        cls, integration_range: IntegrationRange, policy: QuadraturePolicy
    ) -> "DimensionState":
        low, high = integration_range.bounds()
        step_size = divide(high - low, integration_range.steps)
        first = policy.initial_offset(low, step_size).to(low.dtype)
        return cls(
            current=first,
            start=first,
            stop=high,
            step_size=step_size,
            compensation=torch.zeros_like(step_size),
            points=policy.point_count(integration_range.steps),
            reached_boundary=policy.reached_boundary,
        )

    @property
    def dtype(self) -> torch.dtype:
        return self.current.dtype


def advance_coordinate(state: DimensionState) -> None:
    """
    Move ``state.current`` forward by one step.

    Floating point axes use Kahan summation so the drift after many steps
    stays at the order of one rounding error; integer axes add exactly.
    """
    if state.current.is_floating_point():
        y = state.step_size - state.compensation
        t = state.current + y
        state.compensation = (t - state.current) - y
        state.current = t
    else:
        state.current = state.current + state.step_size


def advance_to_next_point(states: Sequence[DimensionState]) -> bool:
    """
    Odometer step over all axes, first axis fastest.

    An axis wraps to its start once it has visited all of its points or
    reaches its boundary. Wrapping drops the compensation and carries into
    the next axis.

    Returns
    -------
    bool
        True when every axis wrapped, i.e. the enumeration started over.
    """
    for state in states:
        advance_coordinate(state)
        state.index += 1
        if state.index < state.points and not bool(
            state.reached_boundary(state.current, state.stop)
        ):
            return False
        state.current = state.start
        state.index = 0
        state.compensation = torch.zeros_like(state.compensation)
    return True


def initialize_dimensions(
    ranges: Sequence[IntegrationRange],
    policies: Sequence[QuadraturePolicy],
) -> List[DimensionState]:
    return [
        DimensionState.from_range(r, p) for r, p in zip(ranges, policies)
    ]


def count_points(
    ranges: Sequence[IntegrationRange], max_points: int = DEFAULT_MAX_POINTS
) -> int:
    """Number of points of the product grid, warning above ``max_points``."""
    total = math.prod(r.steps for r in ranges)
    if max_points is not None and total > max_points:
        warnings.warn(
            f"integration grid has {total} points, more than max_points="
            f"{max_points}; evaluation may take a long time",
            QuadratureWarning,
            stacklevel=3,
        )
    return total


def cell_volume(states: Sequence[DimensionState], dtype: torch.dtype) -> Tensor:
    """Product of the step sizes of all axes, in ``dtype``."""
    volume = torch.ones((), dtype=dtype)
    for state in states:
        volume = volume * state.step_size.to(dtype)
    return volume


def sample_points(policy, ranges) -> Iterator[Tuple[Tensor, ...]]:
    """
    Enumerate the sample points visited by a Riemann sum.

    Parameters
    ----------
    policy : QuadraturePolicy, str or sequence
        Sample placement, shared by all axes or given per axis.
    ranges : sequence of IntegrationRange or tuples
        One range per integration variable.

    Yields
    ------
    tuple of Tensor
        One 0-d tensor per axis, ``prod(steps)`` tuples in total, with the
        first axis varying fastest.

    Examples
    --------
    >>> [tuple(int(c) for c in p) for p in sample_points("left", [(0, 2, 2), (0, 2, 2)])]
    [(0, 0), (1, 0), (0, 1), (1, 1)]
    """
    ranges = as_ranges(ranges)
    states = initialize_dimensions(ranges, resolve_policies(policy, len(ranges)))
    for _ in range(count_points(ranges, max_points=None)):
        yield tuple(state.current for state in states)
        advance_to_next_point(states)
