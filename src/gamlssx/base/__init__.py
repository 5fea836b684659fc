from .distribution import Distribution, ScipyMixin
from .link import LinkFunction

__all__ = [
    "Distribution",
    "ScipyMixin",
    "LinkFunction",
]
