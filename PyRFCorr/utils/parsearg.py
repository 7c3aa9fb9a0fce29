"""Command-line argument parsing for the pyrfcorr entry point.

Key functionality:
- Common logging, progress and color arguments
- Custom argparse actions for validation and type conversion
- get_rfcorr_parser(): Parser factory for pyrfcorr
"""
import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import PyRFCorr
from PyRFCorr.interfaces.config import DEFAULT_OUTPUT


def _make_upper(s: str) -> str:
    return s.upper()


class StoreLoggingLevel(argparse.Action):
    """Convert logging level names (e.g. 'INFO') to logging module constants."""
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[Any, Sequence[Any], None],
        option_string: Optional[str] = None
    ) -> None:
        assert isinstance(values, str), "Logging level must be a string"
        setattr(namespace, self.dest, getattr(logging, values))


class ForceNaturalNumber(argparse.Action):
    """Ensure integer arguments are > 0."""
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[Any, Sequence[Any], None],
        option_string: Optional[str] = None
    ) -> None:
        assert isinstance(values, int), "Argument must be an integer"
        if values < 1:
            parser.error("argument {} must be > 0.".format('/'.join(self.option_strings)))
        setattr(namespace, self.dest, values)


class ForcePositiveNumber(argparse.Action):
    """Ensure real arguments are > 0."""
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[Any, Sequence[Any], None],
        option_string: Optional[str] = None
    ) -> None:
        assert isinstance(values, float), "Argument must be a number"
        if not math.isfinite(values):
            parser.error("argument {} must be a finite number.".format('/'.join(self.option_strings)))
        if not values > 0:
            parser.error("argument {} must be > 0.".format('/'.join(self.option_strings)))
        setattr(namespace, self.dest, values)


class ToColorizeOption(argparse.Action):
    """Convert 'TRUE'/'FALSE' strings to a colorization flag."""
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Union[Any, Sequence[Any], None],
        option_string: Optional[str] = None
    ) -> None:
        assert isinstance(values, str), "Colorization option must be a string"
        if values == "TRUE":
            colorize = True
        elif values == "FALSE":
            colorize = False
        else:
            colorize = sys.stderr.isatty()
        setattr(namespace, self.dest, colorize)


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add logging, progress and color arguments."""
    parser.add_argument(
        "-v", "--log-level", type=_make_upper, default=logging.INFO,
        action=StoreLoggingLevel, choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="Set verbosity. (Default: INFO)"
    )
    parser.add_argument(
        "--disable-progress", action="store_true",
        help="Disable progress bar"
    )
    parser.add_argument(
        "--color", type=_make_upper, default=sys.stderr.isatty(), action=ToColorizeOption,
        choices=("TRUE", "FALSE"),
        help="Coloring log. (Default: auto)"
    )
    parser.add_argument(
        "--version", action="version", version="PyRFCorr " + PyRFCorr.VERSION
    )


def get_rfcorr_parser() -> argparse.ArgumentParser:
    """Create the pyrfcorr argument parser."""
    parser = argparse.ArgumentParser(
        description="Calculate correlation between two structure probing experiments\n"
                    "from RNA Framework XML reactivity files, transcript by transcript.",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    add_common_args(parser)

    proc_args = parser.add_argument_group("Processing behaviors")
    proc_args.add_argument(
        "-p", "--process", type=int, default=1, action=ForceNaturalNumber,
        help="Number of worker process. (Default: 1)"
    )

    input_args = parser.add_argument_group("Input arguments")
    input_args.add_argument(
        "inputs", nargs=2, type=Path, metavar="INPUT",
        help="Two XML files, or two directories of XML files named <transcript>.xml."
    )
    input_args.add_argument(
        "-i", "--ignore-sequence", action="store_true",
        help="Only require transcripts to have the same length instead of the same sequence."
    )

    corr_args = parser.add_argument_group("Correlation parameters")
    corr_args.add_argument(
        "-m", "--min-values", type=float, action=ForcePositiveNumber,
        help="Minimum number of values shared by both profiles to calculate "
             "a correlation. Values < 1 are a fraction of the reactive bases of the transcript."
    )
    corr_args.add_argument(
        "-S", "--spearman", action="store_true",
        help="Calculate Spearman correlation instead of Pearson."
    )
    corr_args.add_argument(
        "-s", "--skip-overall", action="store_true",
        help="Skip the overall correlation over all transcripts."
    )

    output = parser.add_argument_group("Output file arguments")
    output.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT, type=Path,
        help="Output CSV file. (Default: {})".format(DEFAULT_OUTPUT)
    )
    output.add_argument(
        "-f", "--overwrite", action="store_true",
        help="Overwrite the output file if it already exists."
    )

    return parser
