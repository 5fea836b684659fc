"""Density, distribution function, quantile function and random generation
for the generalized extreme value (GEV) distribution.

The distribution function of a GEV distribution with location $\\mu$,
scale $\\sigma > 0$ and shape $\\xi$ is
$$
    F(x | \\mu, \\sigma, \\xi) = \\exp\\left\\{ -\\left[ 1 + \\xi \\left(\\frac{x - \\mu}{\\sigma}\\right) \\right]_+^{-1/\\xi} \\right\\},
$$
where $x_+ = \\max(x, 0)$. For $\\xi = 0$ the distribution function is the
limit as $\\xi \\to 0$, i.e. the Gumbel distribution. The support is
$x \\leq \\mu - \\sigma / \\xi$ for $\\xi < 0$, $x \\geq \\mu - \\sigma / \\xi$
for $\\xi > 0$ and the real line for $\\xi = 0$.

Note that `scipy.stats.genextreme` uses the opposite sign convention for the
shape, $c = -\\xi$.

References:
    Coles, S. G. (2001) *An Introduction to Statistical Modeling of Extreme Values*,
    Springer-Verlag, London. Chapter 3.
"""

from typing import Sequence

import numpy as np
import scipy.stats as st

from .error import OutOfSupportError


def check_scale(sigma: np.ndarray | float) -> None:
    """Raise if any scale parameter is not strictly positive."""
    sigma = np.asarray(sigma)
    if np.any(~(sigma > 0)):
        raise OutOfSupportError(
            f"The scale parameter sigma must be positive. Got {sigma[~(sigma > 0)]}."
        )


def _genextreme(mu, sigma, nu):
    check_scale(sigma)
    return st.genextreme(c=-np.asarray(nu, dtype=float), loc=mu, scale=sigma)


def dgev(
    x: np.ndarray,
    mu: np.ndarray | float = 0,
    sigma: np.ndarray | float = 1,
    nu: np.ndarray | float = 0,
    log: bool = False,
) -> np.ndarray:
    """Density of the GEV distribution.

    Args:
        x (np.ndarray): Vector of quantiles.
        mu (np.ndarray | float, optional): Location. Defaults to 0.
        sigma (np.ndarray | float, optional): Scale. Defaults to 1.
        nu (np.ndarray | float, optional): Shape $\\xi$. Defaults to 0.
        log (bool, optional): Return the log density. Defaults to False.

    Raises:
        OutOfSupportError: If any `sigma` is not positive.

    Returns:
        np.ndarray: The (log) density, 0 (or $-\\infty$) outside the support.
    """
    dist = _genextreme(mu, sigma, nu)
    if log:
        return dist.logpdf(x)
    return dist.pdf(x)


def pgev(
    q: np.ndarray,
    mu: np.ndarray | float = 0,
    sigma: np.ndarray | float = 1,
    nu: np.ndarray | float = 0,
    lower_tail: bool = True,
    log_p: bool = False,
) -> np.ndarray:
    """Distribution function of the GEV distribution.

    Args:
        q (np.ndarray): Vector of quantiles.
        mu (np.ndarray | float, optional): Location. Defaults to 0.
        sigma (np.ndarray | float, optional): Scale. Defaults to 1.
        nu (np.ndarray | float, optional): Shape $\\xi$. Defaults to 0.
        lower_tail (bool, optional): If True, return $P(X \\leq q)$, otherwise $P(X > q)$. Defaults to True.
        log_p (bool, optional): Return the log of the probabilities. Defaults to False.

    Raises:
        OutOfSupportError: If any `sigma` is not positive.

    Returns:
        np.ndarray: The (log) probabilities.
    """
    dist = _genextreme(mu, sigma, nu)
    if lower_tail:
        return dist.logcdf(q) if log_p else dist.cdf(q)
    return dist.logsf(q) if log_p else dist.sf(q)


def qgev(
    p: np.ndarray,
    mu: np.ndarray | float = 0,
    sigma: np.ndarray | float = 1,
    nu: np.ndarray | float = 0,
    lower_tail: bool = True,
    log_p: bool = False,
) -> np.ndarray:
    """Quantile function of the GEV distribution.

    Args:
        p (np.ndarray): Vector of probabilities.
        mu (np.ndarray | float, optional): Location. Defaults to 0.
        sigma (np.ndarray | float, optional): Scale. Defaults to 1.
        nu (np.ndarray | float, optional): Shape $\\xi$. Defaults to 0.
        lower_tail (bool, optional): If True, `p` is $P(X \\leq x)$, otherwise $P(X > x)$. Defaults to True.
        log_p (bool, optional): If True, `p` is given as $\\log(p)$. Defaults to False.

    Raises:
        OutOfSupportError: If any `sigma` is not positive.

    Returns:
        np.ndarray: The quantiles.
    """
    dist = _genextreme(mu, sigma, nu)
    p = np.exp(p) if log_p else np.asarray(p)
    if lower_tail:
        return dist.ppf(p)
    return dist.isf(p)


def rgev(
    n: int | Sequence,
    mu: np.ndarray | float = 0,
    sigma: np.ndarray | float = 1,
    nu: np.ndarray | float = 0,
    random_state: int | np.random.Generator | None = None,
) -> np.ndarray:
    """Random generation for the GEV distribution.

    Args:
        n (int | Sequence): Number of observations. If a sequence of length
            larger than one is passed, its length is taken to be the number required.
        mu (np.ndarray | float, optional): Location. Defaults to 0.
        sigma (np.ndarray | float, optional): Scale. Defaults to 1.
        nu (np.ndarray | float, optional): Shape $\\xi$. Defaults to 0.
        random_state (int | np.random.Generator | None, optional): Seed or
            generator passed to `scipy.stats`. Defaults to None.

    Raises:
        OutOfSupportError: If any `sigma` is not positive.

    Returns:
        np.ndarray: Vector of `n` random deviates. Parameter vectors are
            recycled to length `n`.
    """
    if np.ndim(n) > 0 and len(n) > 1:
        n = len(n)
    n = int(np.squeeze(n))
    check_scale(sigma)
    mu, sigma, nu = (np.resize(np.asarray(a, dtype=float), n) for a in (mu, sigma, nu))
    dist = _genextreme(mu, sigma, nu)
    return dist.rvs(size=n, random_state=random_state)
