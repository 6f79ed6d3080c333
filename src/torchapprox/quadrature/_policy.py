"""Quadrature policies: where a cell is sampled and when an axis wraps."""

from typing import List, Sequence, Type, Union

from torch import Tensor

from torchapprox.quadrature._numeric import divide, egt, gt, midpoint


class QuadraturePolicy:
    """
    Placement of the sample point inside each cell of an axis.

    A policy is stateless. It gives the first coordinate of an axis, the
    predicate telling the odometer that the axis ran past its last sample
    point, and the weighting applied to a pair of adjacent samples by
    :func:`riemann_integrate_samples`.
    """

    name = "policy"

    def initial_offset(self, start: Tensor, step_size: Tensor) -> Tensor:
        """First coordinate sampled on an axis beginning at ``start``."""
        raise NotImplementedError

    def reached_boundary(self, current: Tensor, stop: Tensor) -> Tensor:
        """Whether ``current`` is past the last sample point of the axis."""
        return gt(current, stop)

    def point_count(self, steps: int) -> int:
        """Number of points visited on an axis of ``steps`` cells."""
        return steps

    def sample_weight(self, left: Tensor, right: Tensor) -> Tensor:
        """Output value standing for the cell between two samples."""
        raise NotImplementedError

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return f"{type(self).__name__}()"


class LeftPoint(QuadraturePolicy):
    """
    Sample the left edge of every cell.

    The axis wraps as soon as it reaches ``stop``, so the right edge of the
    domain is never sampled.
    """

    name = "left"

    def initial_offset(self, start, step_size):
        return start

    def reached_boundary(self, current, stop):
        return egt(current, stop)

    def sample_weight(self, left, right):
        return left


class MidPoint(QuadraturePolicy):
    """Sample the center of every cell."""

    name = "mid"

    def initial_offset(self, start, step_size):
        return start + divide(step_size, 2)

    def sample_weight(self, left, right):
        return midpoint(left, right)


class RightPoint(QuadraturePolicy):
    """
    Sample the right edge of every cell.

    ``stop`` itself is the last sample point; the axis wraps one step later.
    """

    name = "right"

    def initial_offset(self, start, step_size):
        return start + step_size

    def sample_weight(self, left, right):
        return right


class TrapezoidNodes(MidPoint):
    """Cell edges from ``start`` through ``stop``, used by the trapezoidal rule."""

    name = "trapezoid"

    def initial_offset(self, start, step_size):
        return start

    def point_count(self, steps):
        return steps + 1


_POLICIES = {
    "left": LeftPoint,
    "left_point": LeftPoint,
    "mid": MidPoint,
    "midpoint": MidPoint,
    "mid_point": MidPoint,
    "right": RightPoint,
    "right_point": RightPoint,
}

PolicyLike = Union[QuadraturePolicy, Type[QuadraturePolicy], str]


def resolve_policy(policy: PolicyLike) -> QuadraturePolicy:
    """
    Return a policy instance for an instance, a policy class or a name.

    Examples
    --------
    >>> resolve_policy("mid")
    MidPoint()
    """
    if isinstance(policy, QuadraturePolicy):
        return policy
    if isinstance(policy, type) and issubclass(policy, QuadraturePolicy):
        return policy()
    if isinstance(policy, str):
        try:
            return _POLICIES[policy.lower()]()
        except KeyError:
            raise ValueError(
                f"unknown quadrature policy {policy!r}, "
                f"expected one of {sorted(_POLICIES)}"
            ) from None
    raise TypeError(
        f"policy must be a QuadraturePolicy or a name, got {type(policy).__name__}"
    )


def resolve_policies(
    policy: Union[PolicyLike, Sequence[PolicyLike]], ndim: int
) -> List[QuadraturePolicy]:
    """One policy per dimension; a single policy applies to every dimension."""
    if isinstance(policy, (list, tuple)):
        if len(policy) != ndim:
            raise ValueError(
                f"got {len(policy)} policies for {ndim} integration ranges"
            )
        return [resolve_policy(p) for p in policy]
    return [resolve_policy(policy)] * ndim
