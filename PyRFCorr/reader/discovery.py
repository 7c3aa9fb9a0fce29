"""Transcript identifier discovery for a pair of inputs.

Two input files are compared directly as a single transcript. Two
directories are compared transcript by transcript, using the XML files
named `<id>.xml` present in both of them.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Set, Tuple

from PyRFCorr.core.exceptions import InputPathError, NothingToCorrelate
from PyRFCorr.interfaces.config import RFCorrConfig
from PyRFCorr.reader.rfxml import XML_SUFFIX

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptSet:
    """Identifiers to process and the mode they were discovered in."""
    single: bool
    ids: Tuple[str, ...]


def _list_transcripts(directory: Path) -> Set[str]:
    return {p.stem for p in directory.iterdir() if p.suffix == XML_SUFFIX and p.is_file()}


def discover_transcripts(input1: Path, input2: Path) -> TranscriptSet:
    """Find the transcripts to correlate.

    Args:
        input1: First dataset file or directory
        input2: Second dataset file or directory

    Returns:
        TranscriptSet with unique identifiers, sorted in directory mode

    Raises:
        InputPathError: If an input does not exist or the inputs mix a file and a directory
        NothingToCorrelate: If two directories share no transcript
    """
    for path in (input1, input2):
        if not path.exists():
            raise InputPathError("Input path '{}' does not exist.".format(path))

    if input1.is_file() and input2.is_file():
        return TranscriptSet(single=True, ids=(input1.stem, ))

    if not (input1.is_dir() and input2.is_dir()):
        raise InputPathError("Inputs must be either two files or two directories.")

    ids1 = _list_transcripts(input1)
    ids2 = _list_transcripts(input2)
    common = ids1 & ids2
    logger.debug("{} transcripts in '{}', {} in '{}', {} in common".format(
        len(ids1), input1, len(ids2), input2, len(common)))
    if not common:
        raise NothingToCorrelate("No transcript is shared by '{}' and '{}'.".format(input1, input2))

    return TranscriptSet(single=False, ids=tuple(sorted(common)))


def resolve_pair(config: RFCorrConfig, transcript_id: str) -> Tuple[Path, Path]:
    """Return the two dataset paths to load for a transcript."""
    input1, input2 = config.inputs
    if config.single_transcript:
        return input1, input2
    filename = transcript_id + XML_SUFFIX
    return input1 / filename, input2 / filename
