"""Trapezoidal rule for callables over rectangular domains."""

import logging
from typing import Callable, Optional, Sequence

import torch
from torch import Tensor

from torchapprox.quadrature._binder import FunctionBinder
from torchapprox.quadrature._dimension import (
    DEFAULT_MAX_POINTS,
    advance_to_next_point,
    cell_volume,
    count_points,
    initialize_dimensions,
)
from torchapprox.quadrature._policy import TrapezoidNodes
from torchapprox.quadrature._range import as_ranges

logger = logging.getLogger(__name__)


def trapezoidal_integrate(
    f: Callable[..., Tensor],
    ranges: Sequence,
    *,
    dtype: Optional[torch.dtype] = None,
    max_points: Optional[int] = DEFAULT_MAX_POINTS,
) -> Tensor:
    """
    Approximate a definite integral with the composite trapezoidal rule.

    Each cell is weighted by the average of ``f`` at its two edges along the
    first axis. The remaining axes are sampled at the left edge of their
    cells.

    Parameters
    ----------
    f : callable
        Integrand taking one argument per range. Must return a scalar.
    ranges : sequence of IntegrationRange or (start, stop, steps) tuples
        One range per integration variable, first axis varying fastest.
    dtype : torch.dtype, optional
        Floating point dtype of the result. Default ``torch.float64``.
    max_points : int, optional
        Warn when the grid has more cells than this.

    Returns
    -------
    Tensor
        0-d integral approximation.

    Raises
    ------
    InvalidDomainError
        If no range is given or a range has a non-positive step count.
    InvalidArityError
        If ``f`` cannot be called with one argument per range.

    Notes
    -----
    ``f`` is evaluated twice per cell, ``2 * prod(steps)`` calls in total.

    Examples
    --------
    >>> trapezoidal_integrate(lambda x: x**2, [(0.0, 1.0, 4)])  # = 0.34375
    """
    ranges = as_ranges(ranges)
    evaluate = FunctionBinder(f, len(ranges), dtype=dtype)
    nodes = TrapezoidNodes()

    states = initialize_dimensions(ranges, [nodes] * len(ranges))
    first_dimension_steps = ranges[0].steps
    total_points = count_points(ranges, max_points)
    volume = cell_volume(states, evaluate.dtype)

    logger.debug(
        "trapezoidal_integrate: %d dimension(s), %d cell(s), cell volume %s",
        len(states),
        total_points,
        volume.item(),
    )

    result = torch.zeros((), dtype=evaluate.dtype)
    for current_point in range(1, total_points + 1):
        output_1 = evaluate(states)

        advance_to_next_point(states)

        output_2 = evaluate(states)

        # The first axis has one more node than cells: skip past ``stop``
        # so the next row starts from the first node again.
        if current_point % first_dimension_steps == 0:
            advance_to_next_point(states)

        result = result + ((output_1 + output_2) / 2) * volume

    return result
