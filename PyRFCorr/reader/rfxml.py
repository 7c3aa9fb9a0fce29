"""Reader for RNA Framework XML reactivity files.

A file holds exactly one transcript:

    <data reactive="AC" ...>
        <transcript id="RNA1" length="10">
            <sequence>ACGUACGUAC</sequence>
            <reactivity>0.12,NaN,...</reactivity>
        </transcript>
    </data>

Sequences and reactive bases are normalized to upper case DNA letters.
Every reactivity token that is not a finite number becomes NaN.
"""
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from os import PathLike
from typing import List, Union

import numpy as np

from PyRFCorr.core.exceptions import DatasetLoadError
from PyRFCorr.interfaces.config import DEFAULT_REACTIVE_BASES

XML_SUFFIX = ".xml"


@dataclass(frozen=True)
class ReactivityDataset:
    """Sequence and per-base reactivity of one transcript."""
    id: str
    sequence: str
    reactivity: np.ndarray
    reactive: str = DEFAULT_REACTIVE_BASES

    @property
    def length(self) -> int:
        return len(self.sequence)


def _normalize_bases(s: str) -> str:
    return "".join(s.split()).upper().replace('U', 'T')


def _parse_reactivity(text: str) -> np.ndarray:
    values: List[float] = []
    for token in "".join(text.split()).split(','):
        try:
            value = float(token)
        except ValueError:
            value = math.nan
        values.append(value if math.isfinite(value) else math.nan)
    return np.array(values, dtype=np.float64)


def load_dataset(path: Union[str, PathLike]) -> ReactivityDataset:
    """Load a reactivity dataset from an XML file.

    Args:
        path: Path to the XML file

    Returns:
        Parsed ReactivityDataset

    Raises:
        DatasetLoadError: If the file is missing, malformed or inconsistent
    """
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        raise DatasetLoadError("Failed to read '{}': {}".format(path, e)) from e

    transcript = root.find("transcript")
    if transcript is None:
        raise DatasetLoadError("No transcript entry in '{}'".format(path))

    sequence_node = transcript.find("sequence")
    reactivity_node = transcript.find("reactivity")
    if sequence_node is None or reactivity_node is None:
        raise DatasetLoadError("Transcript entry without sequence or reactivity in '{}'".format(path))

    sequence = _normalize_bases(sequence_node.text or '')
    if not sequence:
        raise DatasetLoadError("Empty sequence in '{}'".format(path))

    reactivity = _parse_reactivity(reactivity_node.text or '')
    if reactivity.size != len(sequence):
        raise DatasetLoadError("Sequence length ({}) and number of reactivities ({}) "
                               "differ in '{}'".format(len(sequence), reactivity.size, path))

    reactive = _normalize_bases(root.get("reactive") or '') or DEFAULT_REACTIVE_BASES

    return ReactivityDataset(
        id=transcript.get("id", ''),
        sequence=sequence,
        reactivity=reactivity,
        reactive=reactive
    )
