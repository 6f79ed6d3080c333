"""Riemann sums over rectangular domains of any dimension."""

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
from torchapprox.quadrature._policy import MidPoint, resolve_policies
from torchapprox.quadrature._range import as_ranges

logger = logging.getLogger(__name__)


def riemann_integrate(
    policy,
    f: Callable[..., Tensor],
    ranges: Sequence,
    *,
    dtype: Optional[torch.dtype] = None,
    max_points: Optional[int] = DEFAULT_MAX_POINTS,
) -> Tensor:
    """
    Approximate a definite integral with a Riemann sum.

    The domain is the product of the integration ranges. Every axis is split
    into ``steps`` cells of equal width and ``f`` is evaluated once per cell
    of the product grid, at the point selected by ``policy``.

    Parameters
    ----------
    policy : QuadraturePolicy, str or sequence
        Sample placement: ``LeftPoint``, ``MidPoint`` or ``RightPoint``
        (or ``"left"``, ``"mid"``, ``"right"``). A sequence gives one
        policy per axis.
    f : callable
        Integrand taking one argument per range. Arguments are 0-d tensors
        of the range's dtype; parameters annotated ``int`` or ``float``
        receive Python numbers. Must return a scalar.
    ranges : sequence of IntegrationRange or (start, stop, steps) tuples
        One range per integration variable, first axis varying fastest.
    dtype : torch.dtype, optional
        Floating point dtype of the result. Default ``torch.float64``.
    max_points : int, optional
        Warn when the grid has more points than this. None disables the
        check.

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
    NonArithmeticTypeError
        If a range's bounds or dtype are not integer or real.

    Warns
    -----
    QuadratureWarning
        If the grid has more than ``max_points`` points.

    Notes
    -----
    Differentiable with respect to parameters captured in f's closure.

    Floating point axes advance with Kahan summation, so the coordinates
    stay accurate over tens of thousands of steps. Integer axes step by the
    truncated quotient ``(stop - start) // steps``.

    Examples
    --------
    >>> riemann_integrate("mid", lambda x: x + 1, [(0.0, 10.0, 10000)])  # approximately 60.0

    >>> # Integer axis: samples x = 1, 3, 5, 7, 9
    >>> riemann_integrate(MidPoint(), lambda x: x + 1, [(0, 10, 5)])  # = 60.0
    """
    ranges = as_ranges(ranges)
    policies = resolve_policies(policy, len(ranges))
    evaluate = FunctionBinder(f, len(ranges), dtype=dtype)

    states = initialize_dimensions(ranges, policies)
    total_points = count_points(ranges, max_points)
    volume = cell_volume(states, evaluate.dtype)

    logger.debug(
        "riemann_integrate: %d dimension(s), %d point(s), policies %s, "
        "cell volume %s",
        len(states),
        total_points,
        policies,
        volume.item(),
    )

    result = torch.zeros((), dtype=evaluate.dtype)
    for _ in range(total_points):
        output = evaluate(states)

        result = result + output * volume

        advance_to_next_point(states)

    return result


def integrate_midpoint_riemann(
    f: Callable[..., Tensor],
    ranges: Sequence,
    **kwargs,
) -> Tensor:
    """
    Midpoint Riemann sum of ``f`` over ``ranges``.

    Shorthand for ``riemann_integrate(MidPoint(), f, ranges, **kwargs)``.

    Examples
    --------
    >>> integrate_midpoint_riemann(lambda x, y: x * y, [(0.0, 1.0, 2), (0.0, 1.0, 2)])  # = 0.25
    """
    return riemann_integrate(MidPoint(), f, ranges, **kwargs)
