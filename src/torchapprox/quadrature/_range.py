"""Integration ranges and coordinate dtype inference."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import torch
from torch import Tensor

from torchapprox.quadrature._exceptions import (
    IntegrationError,
    InvalidDomainError,
    NonArithmeticTypeError,
)

Bound = Union[int, float, Tensor]

_INTEGER_DTYPES = frozenset(
    [torch.uint8, torch.int8, torch.int16, torch.int32, torch.int64]
)


def is_arithmetic_dtype(dtype: torch.dtype) -> bool:
    """Whether ``dtype`` is an integer or real floating point dtype."""
    return dtype in _INTEGER_DTYPES or (
        dtype.is_floating_point and not dtype.is_complex
    )


def _bound_dtype(value) -> torch.dtype:
    if isinstance(value, Tensor):
        if value.numel() != 1:
            raise NonArithmeticTypeError(
                f"integration bounds must be scalars, got shape {tuple(value.shape)}"
            )
        dtype = value.dtype
    elif isinstance(value, bool):
        dtype = torch.bool
    elif isinstance(value, numbers.Integral):
        return torch.int64
    elif isinstance(value, numbers.Real):
        return torch.float64
    else:
        raise NonArithmeticTypeError(
            f"integration bounds must be real numbers, got {type(value).__name__}"
        )

    if not is_arithmetic_dtype(dtype):
        raise NonArithmeticTypeError(
            f"integration bounds must be real numbers, got {dtype}"
        )
    return dtype


def _scalar(value: Bound, dtype: torch.dtype) -> Tensor:
    if isinstance(value, Tensor):
        return value.reshape(()).to(dtype)
    return torch.tensor(value, dtype=dtype)


@dataclass
class IntegrationRange:
    """
    Bounds and step count of one integration variable.

    Parameters
    ----------
    start : int, float or Tensor
        One end of the interval.
    stop : int, float or Tensor
        The other end. Bounds are swapped when ``start > stop``; the range is
        a magnitude, not a signed direction.
    steps : int
        Number of cells the interval is split into. Must be positive.
    dtype : torch.dtype, optional
        Coordinate dtype of the variable. Inferred from the bounds when
        omitted: two ints give ``torch.int64``, a float gives
        ``torch.float64`` and tensors promote their dtypes.

    Examples
    --------
    >>> IntegrationRange(0, 10, 5).dtype
    torch.int64
    >>> IntegrationRange(10.0, 0.0, 4).bounds()
    (tensor(0., dtype=torch.float64), tensor(10., dtype=torch.float64))
    """

    start: Bound
    stop: Bound
    steps: int
    dtype: Optional[torch.dtype] = None

    def __post_init__(self):
        if isinstance(self.steps, bool) or not isinstance(
            self.steps, numbers.Integral
        ):
            raise InvalidDomainError(
                f"steps must be an integer, got {type(self.steps).__name__}"
            )
        if self.steps <= 0:
            raise InvalidDomainError(f"steps must be positive, got {self.steps}")
        self.steps = int(self.steps)

        inferred = torch.promote_types(
            _bound_dtype(self.start), _bound_dtype(self.stop)
        )
        if self.dtype is None:
            self.dtype = inferred
        elif not isinstance(self.dtype, torch.dtype) or not is_arithmetic_dtype(
            self.dtype
        ):
            raise NonArithmeticTypeError(
                f"dtype must be an integer or floating point dtype, got {self.dtype}"
            )

    def bounds(self) -> Tuple[Tensor, Tensor]:
        """Return ``(low, high)`` as 0-d tensors of ``dtype``."""
        low = _scalar(self.start, self.dtype)
        high = _scalar(self.stop, self.dtype)
        if bool(low > high):
            low, high = high, low
        return low, high


RangeLike = Union[IntegrationRange, Sequence]


def as_range(value: RangeLike) -> IntegrationRange:
    """Convert ``(start, stop, steps[, dtype])`` tuples to :class:`IntegrationRange`."""
    if isinstance(value, IntegrationRange):
        return value
    if isinstance(value, dict):
        return IntegrationRange(**value)
    try:
        return IntegrationRange(*value)
    except IntegrationError:
        raise
    except TypeError as err:
        raise InvalidDomainError(
            f"expected (start, stop, steps) for an integration range, got {value!r}"
        ) from err


def as_ranges(ranges) -> List[IntegrationRange]:
    """
    Normalize the ranges argument of the integrators to a list.

    A single range (an :class:`IntegrationRange` or a flat
    ``(start, stop, steps)`` tuple) is accepted as a one-dimensional domain.
    """
    if isinstance(ranges, IntegrationRange):
        return [ranges]
    if isinstance(ranges, (tuple, list)) and ranges and not isinstance(
        ranges[0], (IntegrationRange, tuple, list, dict)
    ):
        return [as_range(ranges)]

    result = [as_range(r) for r in ranges]
    if not result:
        raise InvalidDomainError("at least one integration range is required")
    return result
