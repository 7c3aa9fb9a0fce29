"""File output utilities with error handling.

Key functionality:
- catch_IOError(): Decorator for I/O error handling
- normalize_output_path(): Enforce the `.csv` suffix
- prepare_outfile(): Output file validation before any processing
"""
import os
from functools import wraps
from pathlib import Path
from typing import Any, Callable, TypeVar, Union
import logging


F = TypeVar('F', bound=Callable[..., Any])

CSV_SUFFIX = ".csv"


def catch_IOError(logger: logging.Logger) -> Callable[[F], F]:
    """Decorator for I/O error handling.

    Logs the failed file name and error number, then re-raises.

    Args:
        logger: Logger instance for error reporting
    """
    def _inner(func: F) -> F:
        @wraps(func)
        def _io_func(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except IOError as e:
                logger.error("Failed to output '{}':\n[Errno {}] {}".format(
                    e.filename, e.errno, e.strerror or '')
                )
                raise e
        return _io_func  # type: ignore
    return _inner


def normalize_output_path(path: Union[str, Path]) -> Path:
    """Append `.csv` unless the path already ends with it."""
    path = Path(path)
    if path.name.endswith(CSV_SUFFIX):
        return path
    return path.with_name(path.name + CSV_SUFFIX)


def prepare_outfile(path: Union[str, Path], overwrite: bool, logger: logging.Logger) -> bool:
    """Validate the output file path.

    An existing file is only accepted with `overwrite`, and the parent
    directory must exist and be writable.

    Args:
        path: Output file path
        overwrite: Whether an existing file may be replaced
        logger: Logger instance for status messages

    Returns:
        True if the file can be written, False otherwise
    """
    path = Path(path)
    if path.exists():
        if path.is_dir():
            logger.critical("Specified output path '{}' is a directory.".format(path))
            return False
        if not overwrite:
            logger.critical("Output file '{}' already exists. "
                            "Use -f/--overwrite to replace it.".format(path))
            return False
        logger.warning("Existing file '{}' will be overwritten.".format(path))

    outdir = path.parent
    if not outdir.is_dir():
        logger.critical("Output directory '{}' does not exist.".format(outdir))
        return False
    if not os.access(str(outdir), os.W_OK):
        logger.critical("Output directory '{}' is not writable.".format(outdir))
        return False
    if path.exists() and not os.access(str(path), os.W_OK):
        logger.critical("Output file '{}' is not writable.".format(path))
        return False

    return True
