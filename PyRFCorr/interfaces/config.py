"""Configuration models and type definitions for PyRFCorr.

Defines the correlation method enum, the minimum-values policy helpers
and the main RFCorrConfig dataclass shared by the parent process and
every worker process.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union
from pathlib import Path
from enum import Enum
from argparse import Namespace

import math
import sys

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


DEFAULT_OUTPUT = "rf_correlate.csv"
DEFAULT_REACTIVE_BASES = "ACGT"


class CorrelationMethod(Enum):
    """Which correlation coefficient to calculate."""
    PEARSON = "pearson"
    SPEARMAN = "spearman"


def normalize_min_values(value: Optional[float]) -> Optional[Union[int, float]]:
    """Normalize a minimum-values threshold.

    Values in (0, 1) are a fraction of the reactive bases and kept as is.
    Values >= 1 are an absolute number of positions, rounded half up.

    Raises:
        ValueError: If value is zero, negative or not finite
    """
    if value is None:
        return None
    if not math.isfinite(value):
        raise ValueError("Minimum values threshold must be a finite number, got {}".format(value))
    if value <= 0:
        raise ValueError("Minimum values threshold must be > 0, got {}".format(value))
    if value < 1:
        return float(value)
    return int(value + 0.5)


@dataclass
class RFCorrConfig:
    """Configuration for a PyRFCorr run.

    The instance is pickled into each worker process, so every field must
    stay a plain value.
    """
    inputs: Tuple[Path, Path]
    output_path: Path = Path(DEFAULT_OUTPUT)
    overwrite: bool = False
    nproc: int = 1
    method: CorrelationMethod = CorrelationMethod.PEARSON
    skip_overall: bool = False
    ignore_sequence: bool = False
    min_values: Optional[Union[int, float]] = None

    single_transcript: bool = False

    def __post_init__(self) -> None:
        if self.nproc < 1:
            raise ValueError("Number of worker processes must be > 0, got {}".format(self.nproc))
        self.min_values = normalize_min_values(self.min_values)

    @property
    def multiprocess(self) -> bool:
        """Check if the configuration is set for multiprocess execution."""
        return self.nproc > 1

    @property
    def accumulate(self) -> bool:
        """Whether filtered values are collected for the overall correlation."""
        return not self.skip_overall

    @classmethod
    def from_args(cls, args: Namespace) -> Self:
        """Create configuration from parsed command-line arguments."""
        input1, input2 = args.inputs
        return cls(
            inputs=(Path(input1), Path(input2)),
            output_path=Path(args.output),
            overwrite=args.overwrite,
            nproc=args.process,
            method=CorrelationMethod.SPEARMAN if args.spearman else CorrelationMethod.PEARSON,
            skip_overall=args.skip_overall,
            ignore_sequence=args.ignore_sequence,
            min_values=args.min_values
        )
