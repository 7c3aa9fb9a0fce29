"""Worker pool orchestration for transcript correlation.

CorrelationHandler fills the order queue with every transcript identifier
before any worker starts, runs a fixed pool of CorrelationWorker processes,
and merges their reports into a ResultAggregator as they arrive. The
aggregator is returned only after every worker has been joined.
"""
import logging
import queue
from multiprocessing import Queue, Lock
from typing import Iterable, List, Optional, Tuple

from PyRFCorr.core.aggregator import ResultAggregator
from PyRFCorr.core.exceptions import WorkerError
from PyRFCorr.core.worker import CorrelationWorker, TranscriptOutcome, ERROR_REPORT
from PyRFCorr.interfaces.config import RFCorrConfig
from PyRFCorr.output.table import CorrelationWriter
from PyRFCorr.utils.progress import ProgressBar

logger = logging.getLogger(__name__)

REPORT_POLL_INTERVAL = 1.0


class CorrelationHandler:
    """Run the correlation of a set of transcripts on a worker pool.

    Attributes:
        config: Run configuration
        transcript_ids: Unique identifiers to process
        nworker: Number of worker processes actually started
    """

    def __init__(self, config: RFCorrConfig, transcript_ids: Iterable[str]) -> None:
        self.config = config
        self.transcript_ids: Tuple[str, ...] = tuple(transcript_ids)
        if len(set(self.transcript_ids)) != len(self.transcript_ids):
            raise ValueError("Transcript identifiers must be unique.")

        self.nworker = max(1, min(config.nproc, len(self.transcript_ids)))
        if not config.multiprocess:
            logger.debug("Run with a single worker process.")
        elif self.nworker < config.nproc:
            logger.debug("Use {} worker(s) for {} transcript(s).".format(
                self.nworker, len(self.transcript_ids)))

        self._order_queue: Optional[Queue] = None
        self._report_queue: Optional[Queue] = None
        self._logger_lock = None
        self._progress = ProgressBar()

    def _create_worker_queues(self) -> None:
        self._order_queue = Queue()
        self._report_queue = Queue()
        self._logger_lock = Lock()

        for transcript_id in self.transcript_ids:
            self._order_queue.put(transcript_id)
        for _ in range(self.nworker):
            self._order_queue.put(None)

    def run(self, writer: Optional[CorrelationWriter] = None) -> ResultAggregator:
        """Execute the correlation workflow.

        Args:
            writer: Optional open output sink receiving one line per success

        Returns:
            ResultAggregator holding the final state of the run

        Raises:
            WorkerError: If a worker process failed unexpectedly
        """
        aggregator = ResultAggregator(accumulate=self.config.accumulate, writer=writer)
        self._create_worker_queues()

        workers = [
            CorrelationWorker(self.config, self._order_queue, self._report_queue, self._logger_lock)
            for _ in range(self.nworker)
        ]
        for worker in workers:
            worker.start()

        try:
            self._receive_results(aggregator, workers)
        except BaseException:
            for worker in workers:
                worker.terminate()
            raise
        finally:
            self._progress.clean()
            for worker in workers:
                worker.join()

        return aggregator

    def _receive_results(self, aggregator: ResultAggregator, workers: List[CorrelationWorker]) -> None:
        """Merge one report per transcript into the aggregator."""
        assert self._report_queue is not None
        self._progress.set("transcripts", len(self.transcript_ids))

        nreceived = 0
        while nreceived < len(self.transcript_ids):
            try:
                report = self._report_queue.get(timeout=REPORT_POLL_INTERVAL)
            except queue.Empty:
                if not any(worker.is_alive() for worker in workers) and self._report_queue.empty():
                    raise WorkerError("All workers exited with {} transcript(s) unreported.".format(
                        len(self.transcript_ids) - nreceived))
                continue

            if isinstance(report, tuple) and report[0] == ERROR_REPORT:
                logger.critical("A worker process failed:\n{}".format(report[1]))
                raise WorkerError("A worker process failed.")

            assert isinstance(report, TranscriptOutcome)
            aggregator.merge(report)
            nreceived += 1
            self._progress.update(nreceived)
