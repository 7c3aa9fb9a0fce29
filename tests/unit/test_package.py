"""Tests for the package-level entry point helpers."""
import logging
from unittest.mock import Mock, patch

import numpy
import scipy

import PyRFCorr
from PyRFCorr import entrypoint, logging_version


def test_logging_version_reports_numeric_stack():
    log = Mock(spec=logging.Logger)
    logging_version(log)

    assert PyRFCorr.VERSION in log.info.call_args_list[0][0][0]
    debug_lines = [c[0][0] for c in log.debug.call_args_list]
    assert "numpy {}, scipy {}".format(numpy.__version__, scipy.__version__) in debug_lines


def test_entrypoint_logs_wall_time():
    log = Mock(spec=logging.Logger)
    body = Mock()

    with patch("PyRFCorr._ensure_spawn") as ensure_spawn:
        entrypoint(log)(body)()

    ensure_spawn.assert_called_once_with()
    body.assert_called_once_with()
    message = log.info.call_args[0][0]
    assert message.startswith("PyRFCorr finished in ")
    assert message.endswith(" s.")


def test_entrypoint_swallows_keyboard_interrupt(capsys):
    log = Mock(spec=logging.Logger)
    log.level = logging.INFO

    with patch("PyRFCorr._ensure_spawn"):
        entrypoint(log)(Mock(side_effect=KeyboardInterrupt))()

    log.info.assert_called_once_with("Interrupted. Partial results may remain in the output file.")
    assert "Traceback" not in capsys.readouterr().err


def test_ensure_spawn_keeps_spawn():
    with patch("multiprocessing.get_start_method", return_value="spawn"), \
         patch("multiprocessing.set_start_method") as set_start_method:
        PyRFCorr._ensure_spawn()
    set_start_method.assert_not_called()
