"""Binding coordinate vectors to integrands."""

import functools
import inspect
from typing import Callable, List, Optional, Sequence

import torch
from torch import Tensor

from torchapprox.quadrature._dimension import DimensionState
from torchapprox.quadrature._exceptions import InvalidArityError

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def _coercion(annotation) -> Optional[Callable]:
    # Parameters annotated int or float receive Python numbers.
    if annotation is int or annotation == "int":
        return int
    if annotation is float or annotation == "float":
        return float
    return None


def _signature(f: Callable) -> Optional[inspect.Signature]:
    try:
        signature = inspect.signature(f)
    except (TypeError, ValueError):
        # Builtins and extension functions may not expose a signature.
        return None
    try:
        return inspect.signature(f, eval_str=True)
    except Exception:
        # Unresolvable string annotations stay strings.
        return signature


def check_arity(f: Callable, arity: int) -> Optional[List[inspect.Parameter]]:
    """
    Raise :class:`InvalidArityError` unless ``f`` accepts ``arity`` positional
    arguments.

    Returns the positional parameters of ``f``, or None when its signature
    cannot be inspected (such integrands are accepted as they are).
    """
    signature = _signature(f)
    if signature is None:
        return None

    parameters = list(signature.parameters.values())
    positional = [p for p in parameters if p.kind in _POSITIONAL]
    variadic = any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in parameters)
    required = sum(1 for p in positional if p.default is inspect.Parameter.empty)
    keyword_only = [
        p.name
        for p in parameters
        if p.kind == inspect.Parameter.KEYWORD_ONLY
        and p.default is inspect.Parameter.empty
    ]

    if keyword_only:
        raise InvalidArityError(
            f"integrand has required keyword-only parameters {keyword_only}"
        )
    if arity < required or (not variadic and arity > len(positional)):
        if variadic:
            expected = f"at least {required}"
        elif required == len(positional):
            expected = f"{required}"
        else:
            expected = f"{required} to {len(positional)}"
        raise InvalidArityError(
            f"integrand takes {expected} positional argument(s) but "
            f"{arity} integration range(s) were given"
        )
    return positional


class FunctionBinder:
    """
    Evaluate an integrand at the current point of a set of axes.

    Coordinates are passed as 0-d tensors of the axis dtype, except for
    parameters annotated ``int`` or ``float``, which receive Python numbers.
    The output is returned as a 0-d tensor of ``dtype``.

    Parameters
    ----------
    f : callable
        Integrand taking one argument per axis.
    arity : int
        Number of axes.
    dtype : torch.dtype, optional
        Floating point dtype of outputs. Default ``torch.float64``.

    Raises
    ------
    InvalidArityError
        If ``f`` cannot take ``arity`` positional arguments.
    """

    def __init__(
        self, f: Callable, arity: int, dtype: Optional[torch.dtype] = None
    ):
        dtype = dtype or torch.float64
        if not dtype.is_floating_point:
            raise ValueError(f"dtype must be a floating point dtype, got {dtype}")

        parameters = check_arity(f, arity) or []
        self.f = f
        self.dtype = dtype
        self.coercions = [
            _coercion(parameters[i].annotation) if i < len(parameters) else None
            for i in range(arity)
        ]

    def bind(self, states: Sequence[DimensionState]) -> Callable[[], Tensor]:
        """Bind the current coordinates, returning a zero-argument callable."""
        args = [
            coerce(state.current) if coerce is not None else state.current
            for coerce, state in zip(self.coercions, states)
        ]
        return functools.partial(self.f, *args)

    def __call__(self, states: Sequence[DimensionState]) -> Tensor:
        output = self.bind(states)()
        if isinstance(output, Tensor):
            if output.numel() != 1:
                raise ValueError(
                    f"integrand must return a scalar, got shape {tuple(output.shape)}"
                )
            return output.reshape(()).to(self.dtype)
        return torch.tensor(output, dtype=self.dtype)
