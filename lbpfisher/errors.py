"""
Error types raised by the descriptor and subspace modules.
"""
import numpy as np


class LBPFisherError(Exception):
    """Base class for all lbpfisher errors."""


class ArgumentError(LBPFisherError, ValueError):
    """Invalid argument: channel count, sample/label count, grid or sampling parameters."""


class UnsupportedElementType(LBPFisherError, TypeError):
    """An operator was called on an image with an element type it cannot handle."""


class SingularMatrixError(LBPFisherError, np.linalg.LinAlgError):
    """The within-class scatter matrix could not be inverted."""


class NotComputedError(LBPFisherError, RuntimeError):
    """A learned basis was requested before a successful compute/fit."""
