import copy
from typing import Sequence

from ..base import LinkFunction
from .identitylinks import Identity
from .inverselinks import Inverse, InverseSquare
from .loglinks import Log


class LinkFunctionFactory:
    """Create link functions from their names in the R package 'gamlss.dist'."""

    links = {
        "identity": Identity,
        "log": Log,
        "inverse": Inverse,
        "1/mu^2": InverseSquare,
    }

    @classmethod
    def from_string(cls, link: str) -> LinkFunction:
        if link not in cls.links:
            raise ValueError(
                f"Did not recognize link '{link}'. Please provide one of {list(cls.links)}."
            )
        return cls.links[link]()


def get_link_function(
    link: LinkFunction | str,
    available: Sequence[str],
    parameter: str,
    family: str,
) -> LinkFunction:
    """Resolve a link function for a distribution parameter.

    Strings are checked against the links available for the parameter, just as
    `gamlss.dist::checklink()` does. Link function instances are accepted
    as given.

    Args:
        link (LinkFunction | str): The link function or its name.
        available (Sequence[str]): The link names available for the parameter.
        parameter (str): The name of the parameter, used in the error message.
        family (str): The name of the distribution family, used in the error message.

    Raises:
        ValueError: If the name is not available or the link has an invalid type.

    Returns:
        LinkFunction: A link function for the parameter.
    """
    if isinstance(link, str):
        if link not in available:
            raise ValueError(
                f"The link '{link}' is not available for {parameter}.link in {family}. "
                f"Available links are {', '.join(repr(a) for a in available)}."
            )
        out = LinkFunctionFactory.from_string(link)
    elif isinstance(link, LinkFunction):
        # Every parameter gets its own link object.
        out = copy.copy(link)
    else:
        raise ValueError(
            f"The link for {parameter}.link in {family} must be a string or a LinkFunction, "
            f"got {type(link).__name__}."
        )
    return out
