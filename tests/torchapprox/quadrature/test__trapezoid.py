import numpy
import pytest
import scipy.integrate
import torch

from torchapprox.quadrature import (
    InvalidArityError,
    InvalidDomainError,
    trapezoidal_integrate,
)


class TestTrapezoidalIntegrate:
    def test_quadratic_coarse(self):
        result = trapezoidal_integrate(lambda x: x**2, [(0.0, 1.0, 4)])
        x = torch.linspace(0, 1, 5, dtype=torch.float64)
        assert result.item() == 0.34375
        assert torch.allclose(result, torch.trapezoid(x**2, x))

    def test_linear_is_exact(self):
        result = trapezoidal_integrate(lambda x: 2 * x + 1, [(0.0, 3.0, 3)])
        assert result.item() == 12.0

    def test_integer_axis(self):
        result = trapezoidal_integrate(lambda x: x, [(0, 10, 5)])
        assert result.item() == 50.0

    def test_matches_scipy(self):
        """Integrate sin(x) from 0 to pi with 1000 cells"""
        result = trapezoidal_integrate(torch.sin, [(0.0, torch.pi, 1000)])

        x = numpy.linspace(0, numpy.pi, 1001)
        expected = scipy.integrate.trapezoid(numpy.sin(x), x)
        assert result.item() == pytest.approx(expected, rel=1e-10)

    def test_swapped_range_invariance(self):
        f = lambda x: torch.exp(x)  # noqa: E731
        forward = trapezoidal_integrate(f, [(0.0, 2.0, 9)])
        backward = trapezoidal_integrate(f, [(2.0, 0.0, 9)])
        assert torch.equal(forward, backward)

    def test_two_dimensional_rows(self):
        # Trapezoidal along x; y is sampled at 0 and 0.5.
        result = trapezoidal_integrate(lambda x, y: x, [(0.0, 1.0, 2), (0.0, 1.0, 2)])
        assert result.item() == 0.5

        result = trapezoidal_integrate(
            lambda x, y: x + y, [(0.0, 1.0, 2), (0.0, 1.0, 2)]
        )
        assert result.item() == 0.75

    def test_each_row_restarts_at_first_node(self):
        calls = []

        def f(x, y):
            calls.append((x.item(), y.item()))
            return x * 0

        trapezoidal_integrate(f, [(0, 2, 2), (0, 2, 2)])
        assert calls == [
            (0, 0), (1, 0),
            (1, 0), (2, 0),
            (0, 1), (1, 1),
            (1, 1), (2, 1),
        ]

    def test_evaluation_count(self):
        calls = []

        def f(x, y, z):
            calls.append(1)
            return x + y + z

        trapezoidal_integrate(f, [(0.0, 1.0, 3), (0, 4, 2), (0.0, 1.0, 5)])
        assert len(calls) == 2 * 3 * 2 * 5

    def test_gradient_through_closure(self):
        theta = torch.tensor(3.0, dtype=torch.float64, requires_grad=True)
        result = trapezoidal_integrate(lambda x: theta * x, [(0.0, 2.0, 4)])
        result.backward()
        assert result.item() == 6.0
        assert theta.grad.item() == 2.0


class TestTrapezoidalValidation:
    def test_zero_steps(self):
        with pytest.raises(InvalidDomainError):
            trapezoidal_integrate(lambda x: x, [(0.0, 1.0, 0)])

    def test_arity_mismatch(self):
        with pytest.raises(InvalidArityError):
            trapezoidal_integrate(lambda x: x, [(0.0, 1.0, 2), (0.0, 1.0, 2)])
