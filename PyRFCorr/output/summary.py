"""Post-run summary of a correlation run.

Consumes the final state of a ResultAggregator once every worker has been
joined: computes the overall correlation when requested and renders the
counters together with the single result or the top results table.
"""
import logging
from typing import List, Optional

from PyRFCorr.core.aggregator import ResultAggregator
from PyRFCorr.core.correlation import CorrelationResult, correlate
from PyRFCorr.core.exceptions import UndefinedCorrelation
from PyRFCorr.interfaces.config import CorrelationMethod

logger = logging.getLogger(__name__)

TOP_N = 10


def overall_correlation(aggregator: ResultAggregator, method: CorrelationMethod) -> Optional[CorrelationResult]:
    """Correlate the values of every correlated transcript concatenated together.

    Returns:
        CorrelationResult, or None if fewer than two transcripts were
        processed or the pooled values do not define a correlation
    """
    if not aggregator.accumulate or aggregator.counters.total < 2:
        return None

    values1, values2 = aggregator.accumulated
    if values1.size == 0:
        return None
    try:
        return correlate(method, values1, values2)
    except UndefinedCorrelation as e:
        logger.warning("Overall correlation is undefined: {}".format(e))
        return None


def _format_result(result: CorrelationResult) -> str:
    return "{:.3f} (p-value: {:.2e})".format(result.coefficient, result.pvalue)


def format_summary(aggregator: ResultAggregator, single: bool,
                   overall: Optional[CorrelationResult] = None, top_n: int = TOP_N) -> str:
    """Render a human readable summary of a run.

    Args:
        aggregator: Final aggregator state
        single: Whether the run compared a single transcript
        overall: Optional overall correlation
        top_n: Number of best transcripts listed in multi-transcript mode

    Returns:
        Multi-line summary text ending with a newline
    """
    lines: List[str] = []
    counters = aggregator.counters

    if single:
        if aggregator.results:
            (_, result), = aggregator.results.items()
            lines.append("Correlation: " + _format_result(result))
        else:
            lines.append("Correlation could not be calculated.")
    else:
        if overall is not None:
            lines.append("Overall correlation: " + _format_result(overall))
        top = aggregator.top(top_n)
        if top:
            width = max(len("Transcript"), *(len(tid) for tid, _ in top))
            lines.append("")
            lines.append("Top {} transcripts:".format(len(top)))
            lines.append("{:<{w}}  {:>11}  {:>9}".format("Transcript", "Correlation", "p-value", w=width))
            for tid, result in top:
                lines.append("{:<{w}}  {:>11.3f}  {:>9.2e}".format(
                    tid, result.coefficient, result.pvalue, w=width))

    lines.append("")
    lines.append("Correlated transcripts: {}".format(counters.correlated))
    if counters.failed:
        lines.append("Failed transcripts: {}".format(counters.failed))
        lines.append("  - Sequence mismatch: {}".format(counters.diffseq))
        lines.append("  - Too few values: {}".format(counters.nominvalues))
        lines.append("  - Other (load error or undefined correlation): {}".format(
            counters.failed - counters.diffseq - counters.nominvalues))

    return "\n".join(lines) + "\n"
