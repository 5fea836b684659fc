from importlib.metadata import PackageNotFoundError, version

from .derivatives import (
    gev_expected_information,
    gev_quasi_information,
    gev_score,
)
from .distributions import GEV, GEVFisher, GEVQuasi
from .error import OutOfSupportError
from .gev import dgev, pgev, qgev, rgev
from .warnings import OutOfSupportWarning

try:
    __version__ = version("gamlssx")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "GEV",
    "GEVFisher",
    "GEVQuasi",
    "dgev",
    "pgev",
    "qgev",
    "rgev",
    "gev_score",
    "gev_expected_information",
    "gev_quasi_information",
    "OutOfSupportError",
    "OutOfSupportWarning",
]
