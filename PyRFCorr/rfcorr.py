"""Main PyRFCorr CLI application for reactivity correlation analysis.

This module provides the main entry point for pyrfcorr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import entrypoint, logging_version
from .utils.logfmt import set_rootlogger
from .utils.parsearg import get_rfcorr_parser
from .utils.progress import ProgressBase
from .utils.output import normalize_output_path, prepare_outfile
from .interfaces.config import RFCorrConfig
from .reader.discovery import TranscriptSet, discover_transcripts
from .handler.correlate import CorrelationHandler
from .core.aggregator import ResultAggregator
from .core.correlation import CorrelationResult
from .core.exceptions import InputPathError, NothingToCorrelate, WorkerError
from .output.table import CorrelationWriter
from .output.summary import overall_correlation, format_summary


logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    """Parse and validate command-line arguments.

    Also sets up logging.

    Raises:
        SystemExit: If argument validation fails
    """
    parser = get_rfcorr_parser()
    args = parser.parse_args()

    set_rootlogger(args.color, args.log_level)
    logging_version(logger)

    args.output = normalize_output_path(args.output)

    return args


@entrypoint(logger)
def main() -> None:
    """Main PyRFCorr application entry point.

    1. Parse command-line arguments
    2. Validate the output file
    3. Discover transcripts shared by both inputs
    4. Run the worker pool
    5. Report the summary
    """
    args = _parse_args()
    config = RFCorrConfig.from_args(args)

    if args.disable_progress or not sys.stderr.isatty():
        ProgressBase.global_switch = False

    if not prepare_outfile(config.output_path, config.overwrite, logger):
        sys.exit(1)

    transcripts = find_transcripts(config)
    config.single_transcript = transcripts.single

    aggregator = run_correlation(config, transcripts)

    overall: Optional[CorrelationResult] = None
    if not transcripts.single and not config.skip_overall:
        overall = overall_correlation(aggregator, config.method)

    sys.stdout.write(format_summary(aggregator, transcripts.single, overall))
    sys.stdout.flush()


def find_transcripts(config: RFCorrConfig) -> TranscriptSet:
    """Discover transcripts or exit on a discovery error."""
    try:
        transcripts = discover_transcripts(*config.inputs)
    except (InputPathError, NothingToCorrelate) as e:
        logger.critical(str(e))
        sys.exit(1)

    if transcripts.single:
        logger.info("Compare '{}' and '{}'".format(*config.inputs))
    else:
        logger.info("Found {} transcript(s) shared by '{}' and '{}'".format(
            len(transcripts.ids), *config.inputs))

    return transcripts


def run_correlation(config: RFCorrConfig, transcripts: TranscriptSet) -> ResultAggregator:
    """Correlate every transcript, streaming results to the output file.

    Returns:
        Final aggregator state

    Raises:
        SystemExit: If the output file can not be written or a worker failed
    """
    handler = CorrelationHandler(config, transcripts.ids)
    logger.info("Calculate {} correlation with {} worker(s)".format(
        config.method.value.capitalize(), handler.nworker))

    try:
        with CorrelationWriter(config.output_path) as writer:
            aggregator = handler.run(writer)
    except IOError:
        sys.exit(1)
    except WorkerError as e:
        logger.critical(str(e))
        sys.exit(1)

    logger.info("Output results to '{}'".format(Path(config.output_path)))
    return aggregator
