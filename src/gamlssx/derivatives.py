"""Score functions and information of the GEV log-likelihood.

The parameters are ordered as location $\\mu$, scale $\\sigma$ and shape
$\\xi$ (`nu` in GAMLSS). All functions broadcast over their arguments and
return arrays of the broadcast shape, respectively `(..., 3, 3)` matrices
for the information.
"""

from typing import Tuple

import numpy as np
import scipy.special as sp

from .error import OutOfSupportError
from .gev import check_scale

SHAPE_LOWER_BOUND = -0.5
# Below these absolute values of the shape the closed forms cancel catastrophically
SCORE_SHAPE_TOLERANCE = 1e-4
INFORMATION_SHAPE_TOLERANCE = 3e-3


def check_shape(nu: np.ndarray | float) -> None:
    """Raise if any shape parameter is not larger than -0.5."""
    nu = np.asarray(nu)
    if np.any(~(nu > SHAPE_LOWER_BOUND)):
        raise OutOfSupportError(
            f"The shape parameter nu must be larger than {SHAPE_LOWER_BOUND}. "
            f"Got {nu[~(nu > SHAPE_LOWER_BOUND)]}."
        )


def gev_score(
    y: np.ndarray,
    mu: np.ndarray | float,
    sigma: np.ndarray | float,
    nu: np.ndarray | float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """The first derivatives of the GEV log-density with respect to the parameters.

    With $z = (y - \\mu) / \\sigma$, $t = 1 + \\xi z$ and $v = t^{-1/\\xi}$:
    $$
    \\begin{align*}
        \\frac{\\partial l}{\\partial \\mu} &= \\frac{1 + \\xi - v}{\\sigma t}, \\\\
        \\frac{\\partial l}{\\partial \\sigma} &= \\frac{1}{\\sigma}\\left(-1 + \\frac{z (1 + \\xi - v)}{t}\\right), \\\\
        \\frac{\\partial l}{\\partial \\xi} &= \\frac{\\log(t) (1 - v)}{\\xi^2} - \\frac{z}{t}\\left(1 + \\frac{1 - v}{\\xi}\\right).
    \\end{align*}
    $$
    For $|\\xi|$ below `SCORE_SHAPE_TOLERANCE` the shape score is evaluated
    by its first order expansion around $\\xi = 0$.

    Args:
        y (np.ndarray): The observations.
        mu (np.ndarray | float): Location.
        sigma (np.ndarray | float): Scale.
        nu (np.ndarray | float): Shape $\\xi$.

    Raises:
        OutOfSupportError: If any `sigma` is not positive.

    Returns:
        Tuple[np.ndarray, np.ndarray, np.ndarray]: The scores for $\\mu$, $\\sigma$ and $\\xi$.
            Observations outside of the support give NaN.
    """
    check_scale(sigma)
    y, mu, sigma, xi = np.broadcast_arrays(
        *(np.asarray(a, dtype=float) for a in (y, mu, sigma, nu))
    )
    z = (y - mu) / sigma
    inside = 1 + xi * z > 0
    gumbel = xi == 0

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        log_t = np.log1p(np.where(inside, xi * z, 0.0))
        t = np.exp(log_t)
        xi_safe = np.where(gumbel, 1.0, xi)
        v = np.where(gumbel, np.exp(-z), np.exp(-log_t / xi_safe))
        a = 1 + xi - v

        dldm = a / (sigma * t)
        dldd = (-1 + z * a / t) / sigma

        dldv = log_t * (1 - v) / xi_safe**2 - (z / t) * (1 + (1 - v) / xi_safe)
        ez = np.exp(-z)
        dldv_zero = -z + 0.5 * z**2 * (1 - ez)
        dldv_slope = z**2 - 2 * z**3 / 3 - ez * (z**4 / 4 - 2 * z**3 / 3)
        dldv = np.where(
            np.abs(xi) < SCORE_SHAPE_TOLERANCE, dldv_zero + xi * dldv_slope, dldv
        )

    dldm = np.where(inside, dldm, np.nan)
    dldd = np.where(inside, dldd, np.nan)
    dldv = np.where(inside, dldv, np.nan)
    return dldm, dldd, dldv


def _closed_form_information(xi: np.ndarray) -> Tuple[np.ndarray, ...]:
    g2 = sp.gamma(2 + xi)
    p = (1 + xi) ** 2 * sp.gamma(1 + 2 * xi)
    q = g2 * (sp.digamma(1 + xi) + (1 + xi) / xi)
    i11 = p
    i22 = (1 - 2 * g2 + p) / xi**2
    i33 = (np.pi**2 / 6 + (1 - np.euler_gamma + 1 / xi) ** 2 - 2 * q / xi + p / xi**2) / xi**2
    i12 = -(p - g2) / xi
    i13 = -(q - p / xi) / xi
    i23 = -(1 - np.euler_gamma + (1 - g2) / xi - q + p / xi) / xi**2
    return i11, i22, i33, i12, i13, i23


def unit_expected_information(nu: np.ndarray | float) -> Tuple[np.ndarray, ...]:
    """The expected information of a GEV with unit scale.

    Following Prescott & Walden (1980), with $p = (1 + \\xi)^2 \\Gamma(1 + 2\\xi)$
    and $q = \\Gamma(2 + \\xi) \\{\\psi(1 + \\xi) + (1 + \\xi) / \\xi\\}$. For
    $|\\xi|$ below `INFORMATION_SHAPE_TOLERANCE` the entries are linearly
    interpolated between the values at the tolerance and its negative.

    Args:
        nu (np.ndarray | float): Shape $\\xi > -0.5$.

    Returns:
        Tuple[np.ndarray, ...]: The entries $(i_{\\mu\\mu}, i_{\\sigma\\sigma}, i_{\\xi\\xi}, i_{\\mu\\sigma}, i_{\\mu\\xi}, i_{\\sigma\\xi})$.
    """
    check_shape(nu)
    xi = np.asarray(nu, dtype=float)
    tol = INFORMATION_SHAPE_TOLERANCE
    near_zero = np.abs(xi) < tol
    entries = _closed_form_information(np.where(near_zero, tol, xi))
    if np.any(near_zero):
        lower = _closed_form_information(np.asarray(-tol))
        upper = _closed_form_information(np.asarray(tol))
        w = (xi + tol) / (2 * tol)
        entries = tuple(
            np.where(near_zero, (1 - w) * lo + w * up, e)
            for e, lo, up in zip(entries, lower, upper)
        )
    return entries


def gev_expected_information(
    sigma: np.ndarray | float, nu: np.ndarray | float
) -> np.ndarray:
    """The expected (Fisher) information of a single GEV observation.

    The information does not depend on the location or the observation.

    Args:
        sigma (np.ndarray | float): Scale.
        nu (np.ndarray | float): Shape $\\xi > -0.5$.

    Raises:
        OutOfSupportError: If any `sigma` is not positive or any `nu` is not larger than -0.5.

    Returns:
        np.ndarray: Array of shape `(..., 3, 3)` with the information matrices.
    """
    check_scale(sigma)
    sigma, nu = np.broadcast_arrays(
        np.asarray(sigma, dtype=float), np.asarray(nu, dtype=float)
    )
    i11, i22, i33, i12, i13, i23 = unit_expected_information(nu)
    out = np.empty(sigma.shape + (3, 3))
    out[..., 0, 0] = i11 / sigma**2
    out[..., 1, 1] = i22 / sigma**2
    out[..., 2, 2] = i33
    out[..., 0, 1] = out[..., 1, 0] = i12 / sigma**2
    out[..., 0, 2] = out[..., 2, 0] = i13 / sigma
    out[..., 1, 2] = out[..., 2, 1] = i23 / sigma
    return out


def gev_quasi_information(
    y: np.ndarray,
    mu: np.ndarray | float,
    sigma: np.ndarray | float,
    nu: np.ndarray | float,
) -> np.ndarray:
    """The outer product of the GEV scores, observation by observation.

    Returns:
        np.ndarray: Array of shape `(..., 3, 3)`.
    """
    score = np.stack(gev_score(y, mu, sigma, nu), axis=-1)
    return score[..., :, None] * score[..., None, :]
