"""Tolerant comparisons and compensated arithmetic on coordinate tensors.

Floating point comparisons absorb the rounding left behind by repeated
stepping: two values compare equal when they are within machine epsilon of
the dtype, scaled by the magnitude of the operands. Integer comparisons are
exact.
"""

from typing import Tuple, Union

import torch
from torch import Tensor

# Relative slack for ``eq``, in multiples of machine epsilon.
_RELATIVE_ULPS = 4


def _as_tensor_like(value: Union[float, int, Tensor], like: Tensor) -> Tensor:
    if isinstance(value, Tensor):
        return value.to(like.dtype)
    return torch.as_tensor(value, dtype=like.dtype, device=like.device)


def eq(lhs: Tensor, rhs: Union[float, int, Tensor]) -> Tensor:
    """
    Elementwise equality, epsilon tolerant for floating point tensors.

    Parameters
    ----------
    lhs : Tensor
        Values to compare. Their dtype decides the comparison.
    rhs : float, int or Tensor
        Values to compare against, converted to ``lhs.dtype``.

    Returns
    -------
    Tensor
        Boolean tensor.

    Examples
    --------
    >>> eq(torch.tensor(0.1) + torch.tensor(0.2), 0.3)
    tensor(True)
    """
    rhs = _as_tensor_like(rhs, lhs)
    if lhs.is_floating_point():
        eps = torch.finfo(lhs.dtype).eps
        return torch.isclose(lhs, rhs, rtol=_RELATIVE_ULPS * eps, atol=eps)
    return lhs == rhs


def gt(lhs: Tensor, rhs: Union[float, int, Tensor]) -> Tensor:
    """Strict ``lhs > rhs``; values that are ``eq`` never compare greater."""
    rhs = _as_tensor_like(rhs, lhs)
    if lhs.is_floating_point():
        return ~eq(lhs, rhs) & (lhs > rhs)
    return lhs > rhs


def egt(lhs: Tensor, rhs: Union[float, int, Tensor]) -> Tensor:
    """Inclusive ``lhs >= rhs``; values that are ``eq`` compare equal."""
    rhs = _as_tensor_like(rhs, lhs)
    if lhs.is_floating_point():
        return eq(lhs, rhs) | (lhs > rhs)
    return lhs >= rhs


def divide(value: Tensor, divisor: Union[int, Tensor]) -> Tensor:
    """
    Divide in the dtype of ``value``.

    Integer tensors use truncating division so that the quotient keeps the
    integer dtype; floating tensors use true division.
    """
    if value.is_floating_point():
        return value / divisor
    return torch.div(value, divisor, rounding_mode="trunc")


def midpoint(lhs: Tensor, rhs: Tensor) -> Tensor:
    """Half-way value ``lhs + (rhs - lhs) / 2`` without overflowing ``lhs + rhs``."""
    return lhs + divide(rhs - lhs, 2)


def kahan_sum(
    sum_compensation: Tuple[Tensor, Tensor],
    value: Union[float, Tensor],
) -> Tuple[Tensor, Tensor]:
    """
    One step of Kahan compensated summation.

    Usable as the reducer of :func:`functools.reduce`, starting from a pair
    of zeros.

    Parameters
    ----------
    sum_compensation : tuple of Tensor
        Running ``(sum, compensation)``.
    value : float or Tensor
        Next term, converted to the dtype of the running sum.

    Returns
    -------
    tuple of Tensor
        Updated ``(sum, compensation)``.

    Examples
    --------
    >>> zero = torch.zeros((), dtype=torch.float64)
    >>> total, _ = functools.reduce(kahan_sum, [0.1] * 10, (zero, zero))
    >>> total
    tensor(1., dtype=torch.float64)
    """
    total, compensation = sum_compensation
    y = _as_tensor_like(value, total) - compensation
    t = total + y
    compensation = (t - total) - y
    return t, compensation
