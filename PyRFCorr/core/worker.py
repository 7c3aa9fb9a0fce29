"""Per-transcript correlation and the worker process that runs it.

Key components:
- OutcomeStatus / TranscriptOutcome: what a worker reports for one transcript
- correlate_transcript(): load, check, filter and correlate one transcript pair
- CorrelationWorker: process that claims transcripts from the order queue

Everything a worker does for a transcript runs on private data. Only the
order queue (claiming) and the report queue (publishing) are shared.
"""
import logging
import traceback
from enum import Enum
from dataclasses import dataclass
from multiprocessing import Process, Queue
from multiprocessing.synchronize import Lock
from typing import Callable, Optional

from PyRFCorr.core.correlation import CorrelationResult, correlate
from PyRFCorr.core.exceptions import (DatasetLoadError, SequenceMismatch,
                                      InsufficientValues, UndefinedCorrelation)
from PyRFCorr.core.filter import CommonValues, count_reactive_bases, select_common_values
from PyRFCorr.interfaces.config import RFCorrConfig
from PyRFCorr.reader.discovery import resolve_pair
from PyRFCorr.reader.rfxml import ReactivityDataset, load_dataset

logger = logging.getLogger(__name__)

ERROR_REPORT = "__ERROR__"

DatasetLoader = Callable[..., ReactivityDataset]


class OutcomeStatus(Enum):
    CORRELATED = "correlated"
    LOAD_FAILED = "load_failed"
    SEQUENCE_MISMATCH = "diffseq"
    TOO_FEW_VALUES = "nominvalues"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class TranscriptOutcome:
    """Result of processing one transcript pair.

    `common` is only attached to successful outcomes when the overall
    correlation is requested.
    """
    transcript_id: str
    status: OutcomeStatus
    result: Optional[CorrelationResult] = None
    common: Optional[CommonValues] = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.CORRELATED


def check_compatibility(dataset1: ReactivityDataset, dataset2: ReactivityDataset,
                        ignore_sequence: bool = False) -> None:
    """Raise SequenceMismatch unless both datasets describe the same transcript."""
    if ignore_sequence:
        if dataset1.length != dataset2.length:
            raise SequenceMismatch("Lengths differ: {} vs {}".format(dataset1.length, dataset2.length))
    elif dataset1.sequence != dataset2.sequence:
        raise SequenceMismatch("Sequences differ")


def correlate_transcript(config: RFCorrConfig, transcript_id: str,
                         loader: DatasetLoader = load_dataset) -> TranscriptOutcome:
    """Correlate the reactivity profiles of one transcript.

    Every per-transcript failure is converted to an outcome status.

    Args:
        config: Run configuration
        transcript_id: Identifier claimed from the order queue
        loader: Dataset reader

    Returns:
        TranscriptOutcome describing success or the reason of failure
    """
    def _fail(status: OutcomeStatus, reason: Exception) -> TranscriptOutcome:
        logger.debug("Skip {} ({}): {}".format(transcript_id, status.value, reason))
        return TranscriptOutcome(transcript_id, status)

    path1, path2 = resolve_pair(config, transcript_id)
    try:
        dataset1 = loader(path1)
        dataset2 = loader(path2)
    except DatasetLoadError as e:
        return _fail(OutcomeStatus.LOAD_FAILED, e)

    try:
        check_compatibility(dataset1, dataset2, config.ignore_sequence)
    except SequenceMismatch as e:
        return _fail(OutcomeStatus.SEQUENCE_MISMATCH, e)

    nbases = count_reactive_bases(dataset1.sequence, dataset1.reactive)
    try:
        common = select_common_values(dataset1.reactivity, dataset2.reactivity,
                                      nbases, config.min_values)
    except InsufficientValues as e:
        return _fail(OutcomeStatus.TOO_FEW_VALUES, e)

    try:
        result = correlate(config.method, common.values1, common.values2)
    except UndefinedCorrelation as e:
        return _fail(OutcomeStatus.UNDEFINED, e)

    return TranscriptOutcome(
        transcript_id, OutcomeStatus.CORRELATED, result,
        common if config.accumulate else None
    )


class CorrelationWorker(Process):
    """Worker process correlating transcripts until the order queue is drained.

    A `None` order tells the worker that no transcript is left. Every
    claimed transcript produces exactly one report on the report queue.
    """

    def __init__(self,
                 config: RFCorrConfig,
                 order_queue: Queue,
                 report_queue: Queue,
                 logger_lock: Lock):
        """Initialize worker.

        Args:
            config: Run configuration
            order_queue: Queue of transcript identifiers to claim
            report_queue: Queue for sending outcomes back to main process
            logger_lock: Lock for process-safe logging
        """
        super().__init__()

        self.config = config
        self.order_queue = order_queue
        self.report_queue = report_queue
        self.logger_lock = logger_lock

    def run(self) -> None:
        """Main worker process loop."""
        try:
            while True:
                transcript_id = self.order_queue.get()
                if transcript_id is None:
                    break

                self.report_queue.put(correlate_transcript(self.config, transcript_id))

        except KeyboardInterrupt:
            if 0 < logger.level <= logging.DEBUG:
                raise

        except Exception as e:
            with self.logger_lock:
                logger.error("{}: Error in worker: {}".format(self.name, e))
            self.report_queue.put((ERROR_REPORT, traceback.format_exc()))

        finally:
            with self.logger_lock:
                logger.debug("{}: Shutting down worker".format(self.name))
