import numpy as np

from ..base import LinkFunction
from .robust_math import robust_reciprocal


class Inverse(LinkFunction):
    """
    The inverse link function.

    The inverse link is defined as \\(g(x) = 1 / x\\) and is its own inverse.
    It corresponds to the `"inverse"` link in GAMLSS.

    The link maps both half-lines onto themselves, so it can be used for
    parameters of either sign. Values closer to zero than `SMALL_NUMBER`
    are mapped to `LARGE_NUMBER` with the sign of the input. Like the
    identity link, it does not keep a positive parameter positive.
    """

    name = "inverse"
    link_support = (-np.inf, np.inf)

    def __init__(self):
        pass

    def link(self, x: np.ndarray) -> np.ndarray:
        return robust_reciprocal(x)

    def inverse(self, x: np.ndarray) -> np.ndarray:
        return robust_reciprocal(x)

    def inverse_derivative(self, x: np.ndarray) -> np.ndarray:
        return -1 / x**2

    def link_derivative(self, x: np.ndarray) -> np.ndarray:
        return -1 / x**2

    def link_second_derivative(self, x: np.ndarray) -> np.ndarray:
        return 2 / x**3


class InverseSquare(LinkFunction):
    """
    The inverse square link function.

    The link is defined as \\(g(x) = 1 / x^2\\) with the inverse
    \\(g^{-1}(\\eta) = 1 / \\sqrt{\\eta}\\). It corresponds to the
    `"1/mu^2"` link in GAMLSS and maps positive values only.
    """

    name = "1/mu^2"
    link_support = (np.nextafter(0, 1), np.inf)

    def __init__(self):
        pass

    def link(self, x: np.ndarray) -> np.ndarray:
        return 1 / x**2

    def inverse(self, x: np.ndarray) -> np.ndarray:
        return 1 / np.sqrt(x)

    def inverse_derivative(self, x: np.ndarray) -> np.ndarray:
        return -0.5 * x ** (-1.5)

    def link_derivative(self, x: np.ndarray) -> np.ndarray:
        return -2 / x**3

    def link_second_derivative(self, x: np.ndarray) -> np.ndarray:
        return 6 / x**4
