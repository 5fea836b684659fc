from .factory import LinkFunctionFactory, get_link_function
from .identitylinks import Identity
from .inverselinks import Inverse, InverseSquare
from .loglinks import Log

__all__ = [
    "Identity",
    "Inverse",
    "InverseSquare",
    "Log",
    "LinkFunctionFactory",
    "get_link_function",
]
