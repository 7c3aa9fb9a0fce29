"""Aggregation of per-transcript outcomes.

ResultAggregator owns every piece of state shared by the run: failure
counters, the results table, the values collected for the overall
correlation and the streamed output. One merge updates all of them inside
a single critical section, so no reader ever sees a counter without its
table entry. After the pool has been joined the aggregator is only read.
"""
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from PyRFCorr.core.correlation import CorrelationResult
from PyRFCorr.core.worker import OutcomeStatus, TranscriptOutcome
from PyRFCorr.output.table import CorrelationWriter


@dataclass
class AggregateCounters:
    """Counters of processed transcripts.

    `failed` includes `diffseq` and `nominvalues`; the remainder are load
    failures and undefined correlations.
    """
    failed: int = 0
    diffseq: int = 0
    nominvalues: int = 0
    correlated: int = 0

    @property
    def total(self) -> int:
        return self.correlated + self.failed


class ResultAggregator:
    """Lock-protected store of run results.

    Attributes:
        counters: AggregateCounters of the run
        results: Mapping of transcript identifier to CorrelationResult
        accumulate: Whether filtered values are kept for the overall correlation
    """

    def __init__(self, accumulate: bool = True, writer: Optional[CorrelationWriter] = None) -> None:
        self.accumulate = accumulate
        self.writer = writer

        self.counters = AggregateCounters()
        self.results: Dict[str, CorrelationResult] = {}
        self._values1: List[np.ndarray] = []
        self._values2: List[np.ndarray] = []

        self._lock = threading.Lock()

    def merge(self, outcome: TranscriptOutcome) -> None:
        """Merge one transcript outcome.

        Raises:
            ValueError: If a result for the transcript was already merged
        """
        with self._lock:
            if not outcome.succeeded:
                self.counters.failed += 1
                if outcome.status is OutcomeStatus.SEQUENCE_MISMATCH:
                    self.counters.diffseq += 1
                elif outcome.status is OutcomeStatus.TOO_FEW_VALUES:
                    self.counters.nominvalues += 1
                return

            assert outcome.result is not None
            if outcome.transcript_id in self.results:
                raise ValueError("Transcript '{}' was already correlated.".format(outcome.transcript_id))

            self.counters.correlated += 1
            self.results[outcome.transcript_id] = outcome.result
            if self.accumulate and outcome.common is not None:
                self._values1.append(outcome.common.values1)
                self._values2.append(outcome.common.values2)

            if self.writer is not None:
                self.writer.write(outcome.transcript_id, outcome.result)

    @property
    def accumulated(self) -> Tuple[np.ndarray, np.ndarray]:
        """Concatenated filtered values of every correlated transcript."""
        if not self._values1:
            return np.empty(0), np.empty(0)
        return np.concatenate(self._values1), np.concatenate(self._values2)

    def top(self, n: int = 10) -> List[Tuple[str, CorrelationResult]]:
        """Return the `n` best results by descending coefficient, ties by identifier."""
        ranked = sorted(self.results.items(), key=lambda item: (-item[1].coefficient, item[0]))
        return ranked[:n]
