"""PyRFCorr: parallel correlation of RNA structure probing reactivities.

The module provides:
- VERSION: Package version string
- logging_version(): Log the versions a run's numbers depend on
- entrypoint(): Decorator for the command-line entry point
"""
import logging
import sys
import time
import traceback
import multiprocessing
from functools import wraps
from typing import Any, Callable

import numpy
import scipy

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def logging_version(logger: Any) -> None:
    """Log PyRFCorr, Python and numerical library versions.

    Coefficients and p-values are computed by numpy and scipy, so their
    versions are logged along with the interpreter's.
    """
    logger.info("PyRFCorr version {} with Python{}.{}.{}".format(
                *[VERSION] + list(sys.version_info[:3])))
    logger.debug("numpy {}, scipy {}".format(numpy.__version__, scipy.__version__))
    for line in sys.version.split('\n'):
        logger.debug(line)


def _ensure_spawn() -> None:
    """Use `spawn` so worker processes never inherit the parent's locks."""
    if multiprocessing.get_start_method(allow_none=True) == "spawn":
        return
    try:
        multiprocessing.set_start_method("spawn")
    except RuntimeError:
        logger.warning("Start method is already set to '{}'; workers are not spawned.".format(
            multiprocessing.get_start_method()))


def entrypoint(logger: Any) -> Callable[[Callable[[], None]], Callable[[], None]]:
    """Wrap the command-line entry point.

    Workers are spawned, the wall time of the run is logged on completion
    and KeyboardInterrupt ends the run without a traceback unless debug
    logging is enabled.
    """
    def _entrypoint_wrapper_base(main_func: Callable[[], None]) -> Callable[[], None]:
        @wraps(main_func)
        def _inner() -> None:
            started = time.perf_counter()
            try:
                _ensure_spawn()
                main_func()
                logger.info("PyRFCorr finished in {:.1f} s.".format(time.perf_counter() - started))
            except KeyboardInterrupt:
                sys.stderr.write("\r\033[K")
                sys.stderr.flush()
                logger.info("Interrupted. Partial results may remain in the output file.")
                if 0 < logger.level <= logging.DEBUG:
                    traceback.print_exc()
        return _inner
    return _entrypoint_wrapper_base
