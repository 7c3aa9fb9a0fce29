"""Parallel processing tests.

Running the worker pool with one or several processes over the same
transcripts must give identical results tables, counters and output
lines (up to line order).
"""
import logging
import math

import numpy as np
import pytest

from PyRFCorr.core.exceptions import WorkerError
from PyRFCorr.handler.correlate import CorrelationHandler
from PyRFCorr.interfaces.config import RFCorrConfig, CorrelationMethod
from PyRFCorr.output.summary import overall_correlation
from PyRFCorr.output.table import CorrelationWriter
from PyRFCorr.reader.discovery import discover_transcripts

NTRANSCRIPTS = 24


@pytest.fixture
def experiment_dirs(tmp_path, xml_writer):
    """Two directories with correlated, mismatched, sparse and broken transcripts."""
    rng = np.random.default_rng(2024)
    dir1 = tmp_path / "exp1"
    dir2 = tmp_path / "exp2"
    dir1.mkdir()
    dir2.mkdir()

    for i in range(NTRANSCRIPTS):
        name = "RNA{:03d}".format(i)
        length = int(rng.integers(20, 60))
        sequence = ''.join(rng.choice(list("ACGT"), size=length))
        values1 = rng.uniform(0, 2, size=length)
        values2 = values1 + rng.normal(0, 0.5, size=length)
        values1[rng.random(length) < 0.2] = math.nan

        if i % 6 == 1:
            values2[2:] = math.nan
        sequence2 = sequence
        if i % 6 == 2:
            sequence2 = ("T" if sequence[0] != "T" else "A") + sequence[1:]

        xml_writer(dir1 / (name + ".xml"), sequence, values1)
        if i % 6 == 3:
            (dir2 / (name + ".xml")).write_text("<data><transcript>")
        else:
            xml_writer(dir2 / (name + ".xml"), sequence2, values2)

    xml_writer(dir1 / "ONLY_IN_FIRST.xml", "ACGTACGT", range(8))
    return dir1, dir2


def _run(dirs, tmp_path, nproc, **kwargs):
    transcripts = discover_transcripts(*dirs)
    config = RFCorrConfig(inputs=dirs, nproc=nproc, min_values=3, **kwargs)
    output = tmp_path / "out_p{}.csv".format(nproc)
    with CorrelationWriter(output) as writer:
        aggregator = CorrelationHandler(config, transcripts.ids).run(writer)
    return aggregator, output.read_text(encoding="utf-8").splitlines()


@pytest.mark.parametrize("method", list(CorrelationMethod))
def test_single_vs_parallel_identical(experiment_dirs, tmp_path, method):
    single, single_lines = _run(experiment_dirs, tmp_path, 1, method=method)
    parallel, parallel_lines = _run(experiment_dirs, tmp_path, 4, method=method)

    assert single.results == parallel.results
    assert single.counters == parallel.counters
    assert sorted(single_lines) == sorted(parallel_lines)

    single_overall = overall_correlation(single, method)
    parallel_overall = overall_correlation(parallel, method)
    assert single_overall.coefficient == pytest.approx(parallel_overall.coefficient)


def test_counters_invariants(experiment_dirs, tmp_path):
    aggregator, lines = _run(experiment_dirs, tmp_path, 3)
    counters = aggregator.counters

    assert counters.total == NTRANSCRIPTS
    assert counters.diffseq == NTRANSCRIPTS // 6
    assert counters.nominvalues == NTRANSCRIPTS // 6
    assert counters.failed == 3 * (NTRANSCRIPTS // 6)
    assert counters.failed >= counters.diffseq + counters.nominvalues
    assert counters.correlated == len(aggregator.results) == len(lines)
    assert "ONLY_IN_FIRST" not in aggregator.results


def test_more_workers_than_transcripts(anticorrelated_pair, tmp_path):
    config = RFCorrConfig(inputs=anticorrelated_pair, nproc=8, single_transcript=True)
    handler = CorrelationHandler(config, ["rna1"])
    assert handler.nworker == 1

    aggregator = handler.run()
    assert aggregator.counters.correlated == 1
    assert aggregator.results["rna1"].coefficient == pytest.approx(-1.0)


def test_sequence_mismatch_writes_nothing(tmp_path, xml_writer):
    file1 = xml_writer(tmp_path / "a.xml", "ACGTACGTAC", range(10))
    file2 = xml_writer(tmp_path / "b.xml", "ACGTACGTAA", range(10))
    config = RFCorrConfig(inputs=(file1, file2), single_transcript=True)

    output = tmp_path / "out.csv"
    with CorrelationWriter(output) as writer:
        aggregator = CorrelationHandler(config, ["a"]).run(writer)

    assert aggregator.counters.diffseq == 1
    assert aggregator.counters.failed == 1
    assert aggregator.counters.correlated == 0
    assert output.read_text() == ''


def test_duplicate_identifiers_rejected(anticorrelated_pair):
    config = RFCorrConfig(inputs=anticorrelated_pair)
    with pytest.raises(ValueError):
        CorrelationHandler(config, ["rna1", "rna1"])


def test_worker_failure_is_reported(anticorrelated_pair, tmp_path):
    config = RFCorrConfig(inputs=anticorrelated_pair)
    # An integer identifier can not be resolved into a path.
    handler = CorrelationHandler(config, [42])
    with pytest.raises(WorkerError):
        handler.run()


@pytest.mark.parametrize("nproc, expected", [
    (1, "Run with a single worker process."),
    (8, "Use 1 worker(s) for 1 transcript(s)."),
])
def test_pool_size_is_logged(anticorrelated_pair, caplog, nproc, expected):
    config = RFCorrConfig(inputs=anticorrelated_pair, nproc=nproc, single_transcript=True)
    with caplog.at_level(logging.DEBUG, logger="PyRFCorr.handler.correlate"):
        CorrelationHandler(config, ["rna1"])
    assert expected in caplog.messages
