from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np


class LinkFunction(ABC):
    """The base class for the link functions."""

    # Name of the link in the R package 'gamlss.dist'
    name: str = "own"

    @property
    @abstractmethod
    def link_support(self) -> Tuple[float, float]:
        """The support of the distribution parameter the link is defined on."""
        pass

    @abstractmethod
    def link(self, x: np.ndarray) -> np.ndarray:
        """Calculate the Link"""

    @abstractmethod
    def inverse(self, x: np.ndarray) -> np.ndarray:
        """Calculate the inverse of the link function"""

    @abstractmethod
    def link_derivative(self, x: np.ndarray) -> np.ndarray:
        """Calculate the first derivative of the link function"""

    @abstractmethod
    def link_second_derivative(self, x: np.ndarray) -> np.ndarray:
        """Calculate the second derivative for the link function"""

    @abstractmethod
    def inverse_derivative(self, x: np.ndarray) -> np.ndarray:
        """Calculate the first derivative for the inverse link function"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
