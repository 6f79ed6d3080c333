"""
Riemann and trapezoidal quadrature on rectangular domains.

Function-based integration (evaluates callable on a product grid):
    riemann_integrate, integrate_midpoint_riemann, trapezoidal_integrate

Sample-based integration (operates on pre-computed points):
    riemann_integrate_samples, Sample

Quadrature policies:
    LeftPoint, MidPoint, RightPoint

Domain description and enumeration:
    IntegrationRange, DimensionState, sample_points

Numeric helpers:
    eq, gt, egt, kahan_sum

Exceptions:
    QuadratureWarning, IntegrationError, InvalidArityError,
    InvalidDomainError, NonArithmeticTypeError
"""

from torchapprox.quadrature._dimension import (
    DimensionState,
    advance_coordinate,
    advance_to_next_point,
    sample_points,
)
from torchapprox.quadrature._exceptions import (
    IntegrationError,
    InvalidArityError,
    InvalidDomainError,
    NonArithmeticTypeError,
    QuadratureWarning,
)
from torchapprox.quadrature._numeric import (
    egt,
    eq,
    gt,
    kahan_sum,
)
from torchapprox.quadrature._policy import (
    LeftPoint,
    MidPoint,
    QuadraturePolicy,
    RightPoint,
)
from torchapprox.quadrature._range import IntegrationRange
from torchapprox.quadrature._riemann import (
    integrate_midpoint_riemann,
    riemann_integrate,
)
from torchapprox.quadrature._samples import (
    Sample,
    calculate_delta,
    points_are_adjacent,
    riemann_integrate_samples,
)
from torchapprox.quadrature._trapezoid import trapezoidal_integrate

__all__ = [
    # Function-based
    "riemann_integrate",
    "integrate_midpoint_riemann",
    "trapezoidal_integrate",
    # Sample-based
    "riemann_integrate_samples",
    "Sample",
    "calculate_delta",
    "points_are_adjacent",
    # Policies
    "QuadraturePolicy",
    "LeftPoint",
    "MidPoint",
    "RightPoint",
    # Domain
    "IntegrationRange",
    "DimensionState",
    "advance_coordinate",
    "advance_to_next_point",
    "sample_points",
    # Numeric helpers
    "eq",
    "gt",
    "egt",
    "kahan_sum",
    # Exceptions
    "QuadratureWarning",
    "IntegrationError",
    "InvalidArityError",
    "InvalidDomainError",
    "NonArithmeticTypeError",
]
