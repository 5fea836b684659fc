import numpy as np

from ..base import LinkFunction
from .robust_math import robust_exp, robust_log


class Log(LinkFunction):
    """
    The log-link function.

    The log-link function is defined as \\(g(x) = \\log(x)\\).
    """

    name = "log"
    link_support = (np.nextafter(0, 1), np.inf)

    def __init__(self):
        pass

    def link(self, x: np.ndarray) -> np.ndarray:
        return robust_log(x)

    def inverse(self, x: np.ndarray) -> np.ndarray:
        return robust_exp(x)

    def inverse_derivative(self, x: np.ndarray) -> np.ndarray:
        return robust_exp(x)

    def link_derivative(self, x: np.ndarray) -> np.ndarray:
        return 1 / x

    def link_second_derivative(self, x: np.ndarray) -> np.ndarray:
        return -1 / x**2
