import numba as nb
import numpy as np

SMALL_NUMBER = 1e-10
LARGE_NUMBER = 1e15
LOG_SMALL_NUMBER = np.log(SMALL_NUMBER)
LOG_LARGE_NUMBER = np.log(LARGE_NUMBER)


@nb.vectorize(["float64(float64)", "float32(float32)"])
def robust_log(x: np.ndarray) -> np.ndarray:
    """
    A robust log function that handles negative and zero values.

    This function returns the logarithm of the input array, replacing
    negative and zero values with a small positive number to avoid
    undefined logarithm values.
    """
    if x > SMALL_NUMBER:
        return np.log(x)
    else:
        return LOG_SMALL_NUMBER


@nb.vectorize(["float64(float64)", "float32(float32)"])
def robust_exp(x: np.ndarray) -> np.ndarray:
    """
    A robust exponential function that handles large values.
    """

    if x > LOG_LARGE_NUMBER:
        return LARGE_NUMBER
    else:
        return np.exp(x)


@nb.vectorize(["float64(float64)", "float32(float32)"])
def robust_reciprocal(x: np.ndarray) -> np.ndarray:
    """The reciprocal $1/x$, returning a large number of matching sign close to zero."""
    if abs(x) < SMALL_NUMBER:
        if x < 0:
            return -LARGE_NUMBER
        return LARGE_NUMBER
    return 1 / x
