"""Riemann sums over pre-sampled ``(inputs, output)`` points."""

import functools
import logging
import numbers
import warnings
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import torch
from torch import Tensor

from torchapprox.quadrature._exceptions import (
    InvalidDomainError,
    NonArithmeticTypeError,
    QuadratureWarning,
)
from torchapprox.quadrature._numeric import eq, gt, kahan_sum, midpoint
from torchapprox.quadrature._policy import resolve_policy

logger = logging.getLogger(__name__)


class Sample(NamedTuple):
    """
    One sampled point of a function.

    Parameters
    ----------
    inputs : tuple of float
        Coordinates of the point. A single number is a 1-D point.
    output : float
        Function value at the point.
    """

    inputs: Union[Tuple[float, ...], float]
    output: float


def difference(lhs: Tensor, rhs: Tensor) -> Tensor:
    """Component-wise ``lhs - rhs`` of coordinate vectors (last dimension)."""
    return lhs - rhs


def has_negative_entry(deltas: Tensor) -> Tensor:
    """Whether any component of each coordinate vector is negative."""
    return (deltas < 0).any(dim=-1)


def points_are_adjacent(lhs: Tensor, rhs: Tensor) -> Tensor:
    """
    Whether ``rhs`` is reachable from ``lhs`` without decreasing any
    coordinate.
    """
    return ~has_negative_entry(difference(rhs, lhs))


def first_entry_equals_to_zero(deltas: Tensor) -> Tensor:
    """Whether the first component of each coordinate vector is ``eq`` to 0."""
    return eq(deltas[..., 0], 0)


def calculate_delta(deltas: Tensor) -> Tensor:
    """
    Cell volume spanned by coordinate differences.

    Product of the components over the last dimension, counting components
    that are not greater than zero as 1.

    Examples
    --------
    >>> calculate_delta(torch.tensor([2.0, -1.0, 0.0, 3.0]))
    tensor(6.)
    """
    return torch.where(gt(deltas, 0), deltas, torch.ones_like(deltas)).prod(
        dim=-1
    )


def _as_inputs(inputs) -> Tuple:
    if isinstance(inputs, Tensor):
        return tuple(inputs.reshape(-1).tolist())
    if isinstance(inputs, numbers.Number):
        return (inputs,)
    return tuple(inputs)


def _stack(samples, dtype: torch.dtype) -> Tuple[Tensor, Tensor]:
    try:
        samples = [Sample(*sample) for sample in samples]
    except TypeError as err:
        raise InvalidDomainError(
            f"samples must be (inputs, output) pairs: {err}"
        ) from err
    if not samples:
        raise InvalidDomainError("at least one sample is required")

    inputs = [_as_inputs(sample.inputs) for sample in samples]
    ndim = len(inputs[0])
    if ndim == 0 or any(len(point) != ndim for point in inputs):
        raise InvalidDomainError(
            "all samples must have the same, non-zero number of inputs"
        )

    try:
        input_tensor = torch.tensor(inputs, dtype=dtype)
        output_tensor = torch.stack(
            [
                sample.output.reshape(()).to(dtype)
                if isinstance(sample.output, Tensor)
                else torch.tensor(sample.output, dtype=dtype)
                for sample in samples
            ]
        )
    except (TypeError, ValueError) as err:
        raise NonArithmeticTypeError(
            f"sample inputs and outputs must be real numbers: {err}"
        ) from err

    return input_tensor, output_tensor


def riemann_integrate_samples(
    policy,
    samples: Sequence[Sample],
    *,
    dtype: Optional[torch.dtype] = None,
) -> Tensor:
    """
    Approximate the integral of a sampled function.

    Consecutive samples ``(P, Q)`` bound a cell whose area is the policy's
    weight of ``P.output`` and ``Q.output`` (left, right or their midpoint)
    times the spacing of their inputs. Samples must be sorted by their
    inputs: a pair whose inputs decrease in any coordinate is not adjacent
    and contributes nothing, as does a pair with repeated first input.

    Parameters
    ----------
    policy : QuadraturePolicy or str
        Weighting of a cell: ``LeftPoint``, ``MidPoint`` or ``RightPoint``.
    samples : sequence of Sample or (inputs, output) pairs
        Sampled points in ascending order of their inputs.
    dtype : torch.dtype, optional
        Floating point dtype of the computation. Default ``torch.float64``.

    Returns
    -------
    Tensor
        0-d integral approximation.

    Raises
    ------
    InvalidDomainError
        If ``samples`` is empty or the samples have differing input counts.
    NonArithmeticTypeError
        If an input or output is not a real number.

    Warns
    -----
    QuadratureWarning
        If the samples have more than one input coordinate. Only 1-D
        samples are supported; the result for more coordinates is the sum
        of products of the positive spacings.

    Notes
    -----
    With ``MidPoint`` this is the trapezoidal rule over the samples.

    Examples
    --------
    >>> samples = [Sample(0.0, 0.0), Sample(1.0, 1.0), Sample(2.0, 4.0)]
    >>> riemann_integrate_samples("left", samples)  # = 1.0
    >>> riemann_integrate_samples("mid", samples)  # = 3.0
    """
    policy = resolve_policy(policy)
    dtype = dtype or torch.float64
    if not dtype.is_floating_point:
        raise ValueError(f"dtype must be a floating point dtype, got {dtype}")

    inputs, outputs = _stack(samples, dtype)
    if inputs.shape[-1] > 1:
        warnings.warn(
            f"samples have {inputs.shape[-1]} input coordinates; only "
            f"one-dimensional samples are supported",
            QuadratureWarning,
            stacklevel=2,
        )

    # The repeated last sample pairs with the real last sample and adds 0.
    inputs = torch.cat([inputs, inputs[-1:]])
    outputs = torch.cat([outputs, outputs[-1:]])

    lhs_inputs, rhs_inputs = inputs[:-1], inputs[1:]
    deltas = difference(rhs_inputs, lhs_inputs)
    contributing = points_are_adjacent(
        lhs_inputs, rhs_inputs
    ) & ~first_entry_equals_to_zero(deltas)

    areas = policy.sample_weight(outputs[:-1], outputs[1:]) * calculate_delta(
        deltas
    )
    areas = torch.where(contributing, areas, torch.zeros_like(areas))

    logger.debug(
        "riemann_integrate_samples: %d sample(s), %d contributing pair(s), "
        "policy %s",
        len(outputs) - 1,
        int(contributing.sum()),
        policy,
    )

    zero = torch.zeros((), dtype=dtype)
    result, _ = functools.reduce(kahan_sum, areas, (zero, zero))
    return result
