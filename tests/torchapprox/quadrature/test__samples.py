import pytest
import torch

from torchapprox.quadrature import (
    InvalidDomainError,
    LeftPoint,
    MidPoint,
    NonArithmeticTypeError,
    QuadratureWarning,
    RightPoint,
    Sample,
    calculate_delta,
    points_are_adjacent,
    riemann_integrate_samples,
)
from torchapprox.quadrature._samples import (
    difference,
    first_entry_equals_to_zero,
    has_negative_entry,
)


@pytest.fixture
def squares():
    return [Sample((float(x),), float(x * x)) for x in range(4)]


class TestRiemannIntegrateSamples:
    def test_left(self, squares):
        assert riemann_integrate_samples(LeftPoint(), squares).item() == 5.0

    def test_right(self, squares):
        assert riemann_integrate_samples(RightPoint(), squares).item() == 14.0

    def test_mid_is_trapezoidal(self, squares):
        result = riemann_integrate_samples(MidPoint(), squares)
        x = torch.arange(4, dtype=torch.float64)
        assert result.item() == 9.5
        assert torch.allclose(result, torch.trapezoid(x**2, x))

    def test_non_uniform_spacing(self):
        samples = [Sample(0.0, 1.0), Sample(0.5, 1.0), Sample(2.0, 1.0)]
        assert riemann_integrate_samples("left", samples).item() == 2.0

    def test_scalar_inputs_and_plain_pairs(self):
        samples = [(0.0, 1.0), ((1.0,), 3.0), (torch.tensor([3.0]), torch.tensor(5.0))]
        assert riemann_integrate_samples("right", samples).item() == 3.0 + 10.0

    def test_decreasing_pair_contributes_nothing(self):
        samples = [Sample(0.0, 1.0), Sample(2.0, 1.0), Sample(1.0, 1.0)]
        for policy in (LeftPoint(), MidPoint(), RightPoint()):
            assert riemann_integrate_samples(policy, samples).item() == 2.0

    def test_repeated_abscissa_contributes_nothing(self):
        samples = [Sample(0.0, 1.0), Sample(1.0, 2.0), Sample(1.0, 7.0), Sample(2.0, 2.0)]
        assert riemann_integrate_samples("left", samples).item() == 1.0 + 7.0

    def test_single_sample(self):
        assert riemann_integrate_samples("mid", [Sample(1.0, 5.0)]).item() == 0.0

    def test_idempotent(self, squares):
        before = list(squares)
        first = riemann_integrate_samples(MidPoint(), squares)
        second = riemann_integrate_samples(MidPoint(), squares)
        assert torch.equal(first, second)
        assert squares == before

    def test_gradient_through_outputs(self):
        outputs = torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64, requires_grad=True)
        samples = [Sample(float(i), outputs[i]) for i in range(3)]
        result = riemann_integrate_samples("mid", samples)
        result.backward()
        assert outputs.grad.tolist() == [0.5, 1.0, 0.5]

    def test_multiple_inputs_warn(self):
        samples = [Sample((0.0, 0.0), 3.0), Sample((1.0, 2.0), 5.0)]
        with pytest.warns(QuadratureWarning, match="2 input coordinates"):
            result = riemann_integrate_samples("left", samples)
        assert result.item() == 6.0


class TestRiemannIntegrateSamplesValidation:
    def test_empty(self):
        with pytest.raises(InvalidDomainError, match="at least one"):
            riemann_integrate_samples("left", [])

    def test_ragged_inputs(self):
        with pytest.raises(InvalidDomainError, match="same"):
            riemann_integrate_samples("left", [Sample(0.0, 1.0), Sample((1.0, 2.0), 1.0)])

    def test_malformed_sample(self):
        with pytest.raises(InvalidDomainError, match="pairs"):
            riemann_integrate_samples("left", [(0.0, 1.0, 2.0)])

    def test_non_numeric(self):
        with pytest.raises(NonArithmeticTypeError):
            riemann_integrate_samples("left", [Sample(0.0, "one")])


class TestSampleHelpers:
    def test_difference(self):
        result = difference(torch.tensor([3.0, 1.0]), torch.tensor([1.0, 2.0]))
        assert result.tolist() == [2.0, -1.0]

    def test_has_negative_entry(self):
        deltas = torch.tensor([[1.0, 0.0], [1.0, -0.5]])
        assert has_negative_entry(deltas).tolist() == [False, True]

    def test_points_are_adjacent(self):
        lhs = torch.tensor([[0.0, 0.0], [1.0, 1.0]])
        rhs = torch.tensor([[1.0, 0.0], [2.0, 0.5]])
        assert points_are_adjacent(lhs, rhs).tolist() == [True, False]

    def test_first_entry_equals_to_zero(self):
        deltas = torch.tensor([[1e-20, 5.0], [0.25, 0.0]], dtype=torch.float64)
        assert first_entry_equals_to_zero(deltas).tolist() == [True, False]

    def test_calculate_delta(self):
        assert calculate_delta(torch.tensor([2.0, -1.0, 0.0, 3.0])).item() == 6.0

    def test_calculate_delta_ignores_rounding_noise(self):
        deltas = torch.tensor([2.0, 1e-20], dtype=torch.float64)
        assert calculate_delta(deltas).item() == 2.0
