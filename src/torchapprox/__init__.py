"""torchapprox: Riemann and trapezoidal quadrature with PyTorch."""

import logging

from . import quadrature
from ._logging import setup_root_logger

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "quadrature",
    "setup_root_logger",
]

__version__ = "0.1.0"
