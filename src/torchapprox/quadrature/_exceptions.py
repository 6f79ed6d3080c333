"""Exceptions for Riemann and trapezoidal quadrature."""


class QuadratureWarning(UserWarning):
    """Warning for quadrature issues (e.g., very large point counts)."""

    pass


class IntegrationError(Exception):
    """Base exception for all quadrature errors."""

    pass


class InvalidArityError(IntegrationError, TypeError):
    """Integrand cannot be called with one argument per integration range."""

    pass


class InvalidDomainError(IntegrationError, ValueError):
    """Integration domain is empty or has a non-positive step count."""

    pass


class NonArithmeticTypeError(IntegrationError, TypeError):
    """Coordinate type of an integration variable is not numeric."""

    pass
