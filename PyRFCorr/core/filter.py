"""Usable-value selection for a pair of reactivity profiles.

Reactivity profiles are float arrays where NaN marks a missing value.
Readers convert every non-numeric token to NaN when parsing, so the
selection below only has to test finiteness.
"""
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import numpy.typing as npt

from PyRFCorr.core.exceptions import InsufficientValues

MIN_CORRELATION_VALUES = 2


@dataclass(frozen=True)
class CommonValues:
    """Values of both profiles projected onto their common index set."""
    indices: np.ndarray
    values1: np.ndarray
    values2: np.ndarray

    @property
    def size(self) -> int:
        return int(self.indices.size)


def count_reactive_bases(sequence: str, reactive: str) -> int:
    """Count positions of `sequence` whose base is in `reactive`."""
    bases = set(reactive)
    return sum(1 for base in sequence if base in bases)


def common_indices(values1: npt.ArrayLike, values2: npt.ArrayLike) -> np.ndarray:
    """Return the increasing indices where both profiles hold a finite value."""
    values1 = np.asarray(values1, dtype=np.float64)
    values2 = np.asarray(values2, dtype=np.float64)
    if values1.shape != values2.shape:
        raise ValueError("Reactivity profiles differ in length: {} vs {}".format(
            values1.size, values2.size))
    return np.flatnonzero(np.isfinite(values1) & np.isfinite(values2))


def passes_min_values(ncommon: int, nbases: int, min_values: Optional[Union[int, float]]) -> bool:
    """Check the minimum-values policy.

    Thresholds are inclusive. A fractional threshold (< 1) applies to the
    number of reactive bases, an absolute one to the number of values.
    """
    if ncommon < MIN_CORRELATION_VALUES:
        return False
    if min_values is None:
        return True
    if min_values < 1:
        return nbases > 0 and ncommon / nbases >= min_values
    return ncommon >= min_values


def select_common_values(values1: npt.ArrayLike, values2: npt.ArrayLike,
                         nbases: int, min_values: Optional[Union[int, float]] = None) -> CommonValues:
    """Project both profiles onto positions where both hold a value.

    Args:
        values1: First reactivity profile
        values2: Second reactivity profile of the same length
        nbases: Number of reactive bases in the transcript
        min_values: Optional minimum-values threshold

    Returns:
        CommonValues with the order of positions preserved

    Raises:
        InsufficientValues: If the common index set does not satisfy the policy
    """
    values1 = np.asarray(values1, dtype=np.float64)
    values2 = np.asarray(values2, dtype=np.float64)
    indices = common_indices(values1, values2)

    if not passes_min_values(indices.size, nbases, min_values):
        raise InsufficientValues("{} common values (reactive bases: {}, threshold: {})".format(
            indices.size, nbases, min_values))

    return CommonValues(indices, values1[indices], values2[indices])
