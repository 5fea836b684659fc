import warnings

import numpy as np
import pytest
import scipy.stats as st

from gamlssx import GEV, GEVFisher, GEVQuasi, OutOfSupportError, OutOfSupportWarning
from gamlssx.links import Identity, Inverse, InverseSquare, Log

VARIANTS = [GEVFisher, GEVQuasi]
DERIVATIVES = [
    "dldm", "d2ldm2", "dldd", "d2ldd2", "dldv", "d2ldv2", "d2ldmdd", "d2ldmdv", "d2ldddv",
]


@pytest.mark.parametrize("variant", VARIANTS)
def test_default_links(variant):
    dist = variant()
    assert isinstance(dist.links[0], Identity)
    assert isinstance(dist.links[1], Log)
    assert isinstance(dist.links[2], Identity)


@pytest.mark.parametrize("variant", VARIANTS)
def test_links_by_name(variant):
    dist = variant(loc_link="1/mu^2", scale_link="inverse", shape_link="log")
    assert isinstance(dist.links[0], InverseSquare)
    assert isinstance(dist.links[1], Inverse)
    assert isinstance(dist.links[2], Log)


@pytest.mark.parametrize("variant", VARIANTS)
@pytest.mark.parametrize(
    "kwargs",
    [
        {"loc_link": "inverse"},
        {"scale_link": "1/mu^2"},
        {"shape_link": "logit"},
    ],
)
def test_invalid_link_names_fail_at_construction(variant, kwargs):
    with pytest.raises(ValueError, match="is not available for"):
        variant(**kwargs)


def test_identity_scale_link_warns():
    with pytest.warns(OutOfSupportWarning):
        GEVFisher(scale_link="identity")


def test_inverse_link_warns_for_scale_but_not_for_shape():
    with pytest.warns(OutOfSupportWarning):
        GEVFisher(scale_link="inverse")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        GEVFisher(shape_link="inverse")


def test_default_links_do_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        GEVFisher()
        GEVQuasi()


@pytest.mark.parametrize("variant", VARIANTS)
def test_validity_predicates(variant):
    dist = variant()
    assert dist.parameter_valid(np.array([-1e6, 0.0, 1e6]), 0)
    assert dist.parameter_valid(np.array([0.1, 2.0]), 1)
    assert not dist.parameter_valid(np.array([0.1, 0.0]), 1)
    assert not dist.parameter_valid(np.array([0.1, -2.0]), 1)
    assert dist.parameter_valid(np.array([-0.49, 0.0, 3.0]), 2)
    assert not dist.parameter_valid(np.array([0.1, -0.5]), 2)
    assert not dist.parameter_valid(np.array([-0.7]), 2)
    assert dist.y_valid(np.array([-1e10, 1e10]))
    with pytest.raises(ValueError):
        dist.parameter_valid(np.array([1.0]), 3)


@pytest.mark.parametrize("variant", VARIANTS)
@pytest.mark.parametrize("invalid", [(1, 0.0), (1, -1.0), (2, -0.5), (2, -1.0)])
def test_derivatives_reject_invalid_parameters(variant, invalid):
    dist = variant()
    y = np.array([0.1, 0.2, 0.3])
    theta = np.tile([0.0, 1.0, 0.1], (3, 1))
    theta[1, invalid[0]] = invalid[1]
    with pytest.raises(OutOfSupportError):
        dist.dl1_dp1(y, theta, 0)
    with pytest.raises(OutOfSupportError):
        dist.dl2_dp2(y, theta, 1)
    with pytest.raises(OutOfSupportError):
        dist.dl2_dpp(y, theta, (0, 2))


def test_distribution_methods_reject_non_positive_scale():
    dist = GEVFisher()
    theta = np.array([[0.0, -1.0, 0.1]])
    with pytest.raises(OutOfSupportError):
        dist.pdf(np.array([0.0]), theta)
    with pytest.raises(OutOfSupportError):
        dist.cdf(np.array([0.0]), theta)


def test_initial_values():
    y = np.array([1.0, 2.0, 4.0, 8.0])
    sd = np.std(y, ddof=1)
    theta = GEVQuasi().initial_values(y)
    assert np.allclose(theta[:, 0], y - 0.45 * sd)
    assert np.allclose(theta[:, 1], 0.78 * sd)
    assert np.allclose(theta[:, 2], 0.1)
    assert np.allclose(GEVFisher().initial_values(y), theta)


@pytest.mark.parametrize("y", [np.array([1.0]), np.array([2.0, 2.0, 2.0])])
def test_initial_values_need_spread(y):
    with pytest.raises(ValueError):
        GEVFisher().initial_values(y)


def test_scipy_parameterization():
    dist = GEVFisher()
    theta = np.array([[0.0, 1.0, 0.2], [1.0, 2.0, -0.2], [2.0, 0.5, 0.0]])
    y = np.array([0.5, 1.5, 2.5])
    expected = st.genextreme(c=-theta[:, 2], loc=theta[:, 0], scale=theta[:, 1])
    assert np.allclose(dist.pdf(y, theta), expected.pdf(y))
    assert np.allclose(dist.cdf(y, theta), expected.cdf(y))
    assert np.allclose(dist.logpdf(y, theta), expected.logpdf(y))
    assert np.allclose(dist.logcdf(y, theta), expected.logcdf(y))
    assert np.allclose(dist.ppf(dist.cdf(y, theta), theta), y)
    assert np.allclose(dist.quantile(np.full(3, 0.5), theta), dist.median(theta))
    assert np.allclose(dist.mean(theta), expected.mean())
    assert dist.rvs(10, theta).shape == (3, 10)


def test_theta_to_scipy_params_flips_shape_sign():
    dist = GEVFisher()
    theta = np.array([[0.0, 1.0, 0.2], [1.0, 2.0, -0.3]])
    params = dist.theta_to_scipy_params(theta)
    assert set(params) == set(dist.scipy_names.values())
    assert np.allclose(params["loc"], theta[:, 0])
    assert np.allclose(params["scale"], theta[:, 1])
    assert np.allclose(params["c"], -theta[:, 2])
    with pytest.raises(OutOfSupportError, match="sigma must be positive"):
        dist.theta_to_scipy_params(np.array([[0.0, 0.0, 0.1]]))


def test_support():
    dist = GEVFisher()
    theta = np.array([[0.0, 1.0, 0.2], [0.0, 1.0, -0.2], [0.0, 1.0, 0.0]])
    lower, upper = dist.support(theta)
    assert np.allclose(lower, [-5.0, -np.inf, -np.inf])
    assert np.allclose(upper, [np.inf, 5.0, np.inf])


def test_deviance_increment_and_residuals():
    dist = GEVFisher()
    y = np.array([-0.5, 0.0, 1.0, 3.0])
    theta = np.tile([0.0, 1.0, 0.1], (4, 1))
    assert np.allclose(dist.deviance_increment(y, theta), -2 * dist.logpdf(y, theta))
    residuals = dist.quantile_residuals(y, theta)
    assert np.allclose(st.norm.cdf(residuals), dist.cdf(y, theta))


def test_base_class_has_no_curvature():
    dist = GEV()
    y = np.array([0.0])
    theta = np.array([[0.0, 1.0, 0.1]])
    assert np.isfinite(dist.dl1_dp1(y, theta, 0)).all()
    with pytest.raises(NotImplementedError):
        dist.dl2_dp2(y, theta, 0)


@pytest.mark.parametrize("variant", VARIANTS)
def test_gamlss_family_record(variant):
    dist = variant(loc_link="log")
    record = dist.gamlss_family()
    assert record["family"] == ("GEV", "Generalized Extreme Value")
    assert record["parameters"] == {"mu": True, "sigma": True, "nu": True}
    assert record["nopar"] == 3
    assert record["type"] == "Continuous"
    assert record["mu.link"] == "log"
    assert record["sigma.link"] == "log"
    assert record["nu.link"] == "identity"
    for name in DERIVATIVES + ["G.dev.incr", "rqres"]:
        assert callable(record[name]), name

    y = np.array([0.5, 1.0, 2.0])
    mu, sigma, nu = np.array([1.0, 1.0, 1.0]), np.array([1.0, 2.0, 1.5]), 0.1
    theta = np.column_stack([mu, sigma, np.full(3, nu)])
    assert np.allclose(record["dldv"](y, mu, sigma, nu), dist.dl1_dp1(y, theta, 2))
    assert np.allclose(record["d2ldd2"](y, mu, sigma, nu), dist.dl2_dp2(y, theta, 1))
    assert np.allclose(
        record["d2ldddv"](y, mu, sigma, nu), dist.dl2_dpp(y, theta, (1, 2))
    )
    assert np.allclose(
        record["G.dev.incr"](y, mu, sigma, nu), -2 * dist.logpdf(y, theta)
    )
    assert np.allclose(record["mu.linkinv"](record["mu.linkfun"](mu)), mu)
    assert np.allclose(record["sigma.dr"](np.log(sigma)), sigma)
    assert np.allclose(record["sigma.initial"](y), dist.initial_values(y)[:, 1])
    assert record["sigma.valid"](sigma)
    assert not record["nu.valid"]([-0.6])
    assert record["y.valid"](y)
