from typing import Callable, Dict, Tuple

import numpy as np
import scipy.stats as st

from ..base import Distribution, LinkFunction, ScipyMixin
from ..derivatives import (
    SHAPE_LOWER_BOUND,
    gev_expected_information,
    gev_quasi_information,
    gev_score,
)
from ..error import OutOfSupportError
from ..gev import check_scale
from ..links import get_link_function

# sqrt(6) / pi and 0.57722 * sqrt(6) / pi, from the moments of the Gumbel distribution
SCALE_INITIAL_FACTOR = 0.78
LOCATION_INITIAL_SHIFT = 0.45
SHAPE_INITIAL_VALUE = 0.1


class GEV(ScipyMixin, Distribution):
    """
    The generalized extreme value (GEV) distribution for GAMLSS fitting.

    The distribution function with location $\\mu$, scale $\\sigma > 0$
    and shape $\\xi$ is
    $$
        F(y | \\mu, \\sigma, \\xi) = \\exp\\left\\{ -\\left[ 1+\\xi\\left(\\frac{y-\\mu}{\\sigma}\\right) \\right]_+^{-1/\\xi} \\right\\},
    $$
    with the Gumbel distribution as the limit for $\\xi = 0$. The support is
    bounded below by $\\mu - \\sigma / \\xi$ for $\\xi > 0$ and bounded above by it
    for $\\xi < 0$.

    For each observation the restriction $\\xi > -1/2$ is imposed, which is
    necessary for the usual asymptotic likelihood theory to be applicable.

    The subclasses `GEVFisher` and `GEVQuasi` differ only in the curvature
    used for the scoring algorithm. This class is not meant to be used directly.

    References:
        Coles, S. G. (2001) *An Introduction to Statistical Modeling of Extreme
        Values*, Springer-Verlag, London. Chapter 3.
    """

    family = ("GEV", "Generalized Extreme Value")
    distribution_type = "Continuous"

    parameter_names = {0: "mu", 1: "sigma", 2: "nu"}
    parameter_support = {
        0: (-np.inf, np.inf),
        1: (np.nextafter(0, 1), np.inf),
        2: (-np.inf, np.inf),
    }
    distribution_support = (-np.inf, np.inf)

    # The links available in 'gamlss.dist' for each parameter
    available_links = {
        0: ("1/mu^2", "log", "identity"),
        1: ("inverse", "log", "identity"),
        2: ("inverse", "log", "identity"),
    }

    scipy_dist = st.genextreme
    # The column of nu goes to c, its sign is flipped in theta_to_scipy_params
    scipy_names = {"mu": "loc", "sigma": "scale", "nu": "c"}

    def __init__(
        self,
        loc_link: LinkFunction | str = "identity",
        scale_link: LinkFunction | str = "log",
        shape_link: LinkFunction | str = "identity",
    ) -> None:
        """Initialize the GEV distribution.

        Args:
            loc_link (LinkFunction | str, optional): Location link. Defaults to "identity".
            scale_link (LinkFunction | str, optional): Scale link. Defaults to "log".
            shape_link (LinkFunction | str, optional): Shape link. Defaults to "identity".

        Raises:
            ValueError: If a link is given by a name not available for the parameter.
        """
        links = {}
        for param, link in enumerate((loc_link, scale_link, shape_link)):
            links[param] = get_link_function(
                link,
                available=self.available_links[param],
                parameter=self.parameter_names[param],
                family=self.family[0],
            )
        super().__init__(links=links)

    def theta_to_scipy_params(self, theta: np.ndarray) -> Dict[str, np.ndarray]:
        params = super().theta_to_scipy_params(theta)
        check_scale(params["scale"])
        # scipy uses the opposite sign for the shape
        params["c"] = -params["c"]
        return params

    def parameter_valid(self, values: np.ndarray, param: int) -> bool:
        """Check the validity of the values for the distribution parameter.

        Corresponds to `mu.valid`, `sigma.valid` and `nu.valid` in GAMLSS.
        """
        if param == 0:
            return True
        if param == 1:
            return bool(np.all(values > 0))
        if param == 2:
            return bool(np.all(values > SHAPE_LOWER_BOUND))
        raise ValueError("param must be 0 (mu), 1 (sigma) or 2 (nu)")

    def y_valid(self, y: np.ndarray) -> bool:
        """The response is valid on the whole real line."""
        return True

    def validate_parameters(self, theta: np.ndarray) -> None:
        """Raise an `OutOfSupportError` if any column of theta is not valid."""
        for param, name in self.parameter_names.items():
            if not self.parameter_valid(theta[:, param], param):
                raise OutOfSupportError(
                    f"Invalid values for the parameter {name} of {self.family[0]}. "
                    "GAMLSS requires sigma > 0 and nu > -0.5 for all observations."
                )

    def support(self, theta: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """The lower and upper bound of the support for each row of theta."""
        mu, sigma, nu = self.theta_to_params(theta)
        with np.errstate(divide="ignore"):
            endpoint = mu - sigma / nu
        lower = np.where(nu > 0, endpoint, -np.inf)
        upper = np.where(nu < 0, endpoint, np.inf)
        return lower, upper

    def dl1_dp1(self, y: np.ndarray, theta: np.ndarray, param: int = 0) -> np.ndarray:
        self._validate_dln_dpn_inputs(y, theta, param)
        self.validate_parameters(theta)
        return gev_score(y, *self.theta_to_params(theta))[param]

    def _information(
        self, y: np.ndarray, theta: np.ndarray, params: Tuple[int, int]
    ) -> np.ndarray:
        raise NotImplementedError("Use GEVFisher() or GEVQuasi().")

    def dl2_dp2(self, y: np.ndarray, theta: np.ndarray, param: int = 0) -> np.ndarray:
        self._validate_dln_dpn_inputs(y, theta, param)
        self.validate_parameters(theta)
        return -self._information(y, theta, (param, param))

    def dl2_dpp(
        self, y: np.ndarray, theta: np.ndarray, params: Tuple[int, int] = (0, 1)
    ) -> np.ndarray:
        self._validate_dl2_dpp_inputs(y, theta, params)
        self.validate_parameters(theta)
        return -self._information(y, theta, params)

    def initial_values(self, y: np.ndarray) -> np.ndarray:
        y = np.asarray(y, dtype=float)
        if y.shape[0] < 2:
            raise ValueError("At least two observations are needed for initial values.")
        sd = np.std(y, ddof=1)
        if not sd > 0:
            raise ValueError(
                "The observations have no spread. Cannot derive an initial scale."
            )
        out = np.empty((y.shape[0], self.n_params))
        out[:, 0] = y - LOCATION_INITIAL_SHIFT * sd
        out[:, 1] = SCALE_INITIAL_FACTOR * sd
        out[:, 2] = SHAPE_INITIAL_VALUE
        return out

    def gamlss_family(self) -> Dict[str, object]:
        """The distribution as a record with the field names of a `gamlss.family` object.

        Callbacks take the vectors `(y, mu, sigma, nu)` as positional arguments,
        the initial values take `y` and the validity checks the parameter vector.

        Returns:
            Dict[str, object]: The GAMLSS family record.
        """

        def as_theta(mu, sigma, nu) -> np.ndarray:
            mu, sigma, nu = np.broadcast_arrays(
                *(np.asarray(a, dtype=float) for a in (mu, sigma, nu))
            )
            return np.column_stack([mu.ravel(), sigma.ravel(), nu.ravel()])

        def wrap(method: Callable, *args) -> Callable:
            def callback(y, mu, sigma, nu):
                return method(np.asarray(y, dtype=float), as_theta(mu, sigma, nu), *args)

            return callback

        record = {
            "family": self.family,
            "parameters": {name: True for name in self.parameter_names.values()},
            "nopar": self.n_params,
            "type": self.distribution_type,
        }
        for param, name in self.parameter_names.items():
            link = self.links[param]
            record[f"{name}.link"] = link.name
            record[f"{name}.linkfun"] = link.link
            record[f"{name}.linkinv"] = link.inverse
            record[f"{name}.dr"] = link.inverse_derivative

        letters = {0: "m", 1: "d", 2: "v"}
        for param, letter in letters.items():
            record[f"dld{letter}"] = wrap(self.dl1_dp1, param)
            record[f"d2ld{letter}2"] = wrap(self.dl2_dp2, param)
        for a, b in ((0, 1), (0, 2), (1, 2)):
            record[f"d2ld{letters[a]}d{letters[b]}"] = wrap(self.dl2_dpp, (a, b))

        record["G.dev.incr"] = wrap(self.deviance_increment)
        record["rqres"] = wrap(self.quantile_residuals)
        for param, name in self.parameter_names.items():
            record[f"{name}.initial"] = (
                lambda y, param=param: self.initial_values(y)[:, param]
            )
            record[f"{name}.valid"] = (
                lambda values, param=param: self.parameter_valid(
                    np.asarray(values), param
                )
            )
        record["y.valid"] = self.y_valid
        return record


class GEVFisher(GEV):
    """
    The GEV distribution with Fisher's scoring.

    The second derivatives of the log-likelihood are replaced by the negative
    expected Fisher information, which does not depend on the data.
    """

    corresponding_gamlss: str = "GEVfisher"

    def _information(
        self, y: np.ndarray, theta: np.ndarray, params: Tuple[int, int]
    ) -> np.ndarray:
        _, sigma, nu = self.theta_to_params(theta)
        info = gev_expected_information(sigma, nu)
        return info[..., params[0], params[1]]


class GEVQuasi(GEV):
    """
    The GEV distribution with quasi-Newton scoring.

    The second derivatives of the log-likelihood are approximated by the
    negative cross products of the first derivatives.
    """

    corresponding_gamlss: str = "GEVquasi"

    def _information(
        self, y: np.ndarray, theta: np.ndarray, params: Tuple[int, int]
    ) -> np.ndarray:
        info = gev_quasi_information(y, *self.theta_to_params(theta))
        return info[..., params[0], params[1]]
