from .gev import GEV, GEVFisher, GEVQuasi

__all__ = [
    "GEV",
    "GEVFisher",
    "GEVQuasi",
]
