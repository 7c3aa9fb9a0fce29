"""Tests for command-line parsing and configuration building."""
import logging
from pathlib import Path

import pytest

from PyRFCorr.interfaces.config import (RFCorrConfig, CorrelationMethod,
                                        normalize_min_values, DEFAULT_OUTPUT)
from PyRFCorr.utils.parsearg import get_rfcorr_parser


def _parse(*argv):
    return get_rfcorr_parser().parse_args(list(argv))


class TestParser:

    def test_defaults(self):
        args = _parse("a.xml", "b.xml")
        assert args.inputs == [Path("a.xml"), Path("b.xml")]
        assert args.output == Path(DEFAULT_OUTPUT)
        assert args.process == 1
        assert args.log_level == logging.INFO
        assert args.min_values is None
        assert not (args.overwrite or args.spearman or args.skip_overall or args.ignore_sequence)

    def test_options(self):
        args = _parse("d1", "d2", "-p", "4", "-o", "res", "-f", "-m", "0.5",
                      "-S", "-s", "-i", "-v", "debug", "--color", "false")
        assert args.process == 4
        assert args.output == Path("res")
        assert args.overwrite and args.spearman and args.skip_overall and args.ignore_sequence
        assert args.min_values == 0.5
        assert args.log_level == logging.DEBUG
        assert args.color is False

    @pytest.mark.parametrize("argv", [
        ("a.xml", ),
        ("a.xml", "b.xml", "c.xml"),
        ("a.xml", "b.xml", "-p", "0"),
        ("a.xml", "b.xml", "-m", "0"),
        ("a.xml", "b.xml", "-m", "-1"),
        ("a.xml", "b.xml", "-m", "inf"),
        ("a.xml", "b.xml", "-m", "nan"),
    ])
    def test_invalid_arguments(self, argv):
        with pytest.raises(SystemExit) as e:
            _parse(*argv)
        assert e.value.code == 2


class TestConfig:

    def test_from_args(self):
        config = RFCorrConfig.from_args(_parse("d1", "d2", "-p", "3", "-m", "4.6", "-S"))
        assert config.inputs == (Path("d1"), Path("d2"))
        assert config.nproc == 3
        assert config.multiprocess
        assert config.min_values == 5
        assert config.method is CorrelationMethod.SPEARMAN
        assert config.accumulate
        assert not config.single_transcript

    def test_skip_overall_disables_accumulation(self):
        config = RFCorrConfig.from_args(_parse("d1", "d2", "-s"))
        assert not config.accumulate
        assert config.method is CorrelationMethod.PEARSON

    @pytest.mark.parametrize("value, expected", [
        (None, None), (0.25, 0.25), (1, 1), (2.4, 2), (2.5, 3), (10.0, 10),
    ])
    def test_normalize_min_values(self, value, expected):
        assert normalize_min_values(value) == expected

    @pytest.mark.parametrize("value", [0, -0.5, float("inf"), float("nan")])
    def test_invalid_min_values(self, value):
        with pytest.raises(ValueError):
            normalize_min_values(value)

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            RFCorrConfig(inputs=(Path("a"), Path("b")), nproc=0)
