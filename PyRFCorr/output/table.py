"""Streamed output of per-transcript correlations.

Each correlated transcript is written as one semicolon separated line,
`<identifier>;<coefficient>;<p-value>`, as soon as it is merged. Values
are written with full precision and lines are flushed one by one.
"""
from __future__ import annotations

import logging
import os
import threading
from typing import Any, Optional, TextIO

import sys
if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from PyRFCorr.core.correlation import CorrelationResult
from PyRFCorr.utils.output import catch_IOError

OUTPUT_SUFFIX = ".csv"
DELIMITER = ';'

logger = logging.getLogger(__name__)


def format_line(transcript_id: str, result: CorrelationResult) -> str:
    """Format one output line, including the trailing newline."""
    return DELIMITER.join((transcript_id, repr(float(result.coefficient)), repr(float(result.pvalue)))) + '\n'


class CorrelationWriter:
    """Shared, lock-protected append sink for correlation results.

    Attributes:
        path: Output file path
        fp: File object while the writer is open
    """

    def __init__(self, path: os.PathLike[str]) -> None:
        self.path = path
        self.fp: Optional[TextIO] = None
        self.nlines = 0
        self._lock = threading.Lock()

    @catch_IOError(logger)
    def open(self) -> None:
        """Open the output file for writing, truncating it."""
        self.fp = open(self.path, 'w', encoding="utf-8", newline='')

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(self, _ex_type: Optional[type], _ex_value: Optional[Exception], _trace: Optional[Any]) -> None:
        self.close()

    def close(self) -> None:
        with self._lock:
            if self.fp is not None:
                self.fp.close()
                self.fp = None

    @catch_IOError(logger)
    def write(self, transcript_id: str, result: CorrelationResult) -> None:
        """Append one result line atomically with respect to other writers."""
        line = format_line(transcript_id, result)
        with self._lock:
            if self.fp is None:
                raise ValueError("Output file '{}' is not open.".format(self.path))
            self.fp.write(line)
            self.fp.flush()
            self.nlines += 1
