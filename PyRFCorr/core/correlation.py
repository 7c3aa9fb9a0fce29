"""Correlation coefficients with two-tailed significance.

Pure functions computing Pearson product-moment and Spearman rank
correlation between two equally sized numeric vectors. Significance is
obtained from Student's t-distribution with n - 2 degrees of freedom.

For n == 2 the coefficient is always +/-1 and the t statistic is
undefined; the p-value is reported as 1.0 in that case.
"""
from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np
import numpy.typing as npt
from scipy.stats import rankdata
from scipy.stats import t as t_dist

from PyRFCorr.core.exceptions import UndefinedCorrelation
from PyRFCorr.interfaces.config import CorrelationMethod


@dataclass(frozen=True)
class CorrelationResult:
    """Correlation coefficient and its two-tailed p-value."""
    coefficient: float
    pvalue: float


def _as_pair(x: npt.ArrayLike, y: npt.ArrayLike):
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.ndim != 1 or x.shape != y.shape:
        raise UndefinedCorrelation(
            "Vectors must be one dimensional and of equal length: {} vs {}".format(x.shape, y.shape)
        )
    if x.size < 2:
        raise UndefinedCorrelation("At least 2 values are required, got {}".format(x.size))
    return x, y


def _t_test(r: float, n: int) -> float:
    if n == 2:
        return 1.0
    if abs(r) == 1.0:
        return 0.0
    df = n - 2
    t = r * np.sqrt(df / (1.0 - r * r))
    return float(min(1.0, max(0.0, 2.0 * t_dist.sf(abs(t), df))))


def pearson(x: npt.ArrayLike, y: npt.ArrayLike) -> CorrelationResult:
    """Calculate Pearson correlation coefficient.

    Args:
        x: First vector
        y: Second vector with the same length as `x`

    Returns:
        CorrelationResult with the coefficient in [-1, 1] and p-value in [0, 1]

    Raises:
        UndefinedCorrelation: If vectors differ in length, hold fewer than
            2 values or one of them is constant
    """
    x, y = _as_pair(x, y)
    xm = x - x.mean()
    ym = y - y.mean()
    denom = np.sqrt(np.dot(xm, xm) * np.dot(ym, ym))
    if denom == 0 or not np.isfinite(denom):
        raise UndefinedCorrelation("Correlation is undefined for constant vectors")

    r = float(np.clip(np.dot(xm, ym) / denom, -1.0, 1.0))
    return CorrelationResult(r, _t_test(r, x.size))


def spearman(x: npt.ArrayLike, y: npt.ArrayLike) -> CorrelationResult:
    """Calculate Spearman rank correlation coefficient.

    Tied values receive the average of the ranks they occupy, then the
    Pearson formula is applied to the ranks.
    """
    x, y = _as_pair(x, y)
    return pearson(rankdata(x, method="average"), rankdata(y, method="average"))


CORRELATION_FUNCTIONS: Dict[CorrelationMethod, Callable[[npt.ArrayLike, npt.ArrayLike], CorrelationResult]] = {
    CorrelationMethod.PEARSON: pearson,
    CorrelationMethod.SPEARMAN: spearman,
}


def correlate(method: CorrelationMethod, x: npt.ArrayLike, y: npt.ArrayLike) -> CorrelationResult:
    """Dispatch to the correlation function selected by `method`."""
    return CORRELATION_FUNCTIONS[method](x, y)
