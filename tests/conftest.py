"""Shared fixtures for PyRFCorr tests."""
import math
from pathlib import Path
from typing import Optional, Sequence

import pytest


def write_rf_xml(path: Path, sequence: str, reactivity: Sequence[float],
                 reactive: Optional[str] = "ACGT", transcript_id: Optional[str] = None) -> Path:
    """Write a minimal RNA Framework XML reactivity file."""
    values = ','.join("NaN" if math.isnan(v) else repr(float(v)) for v in reactivity)
    attrs = ' reactive="{}"'.format(reactive) if reactive is not None else ''
    path.write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<data combined="FALSE"{attrs}>\n'
        '\t<transcript id="{tid}" length="{length}">\n'
        '\t\t<sequence>\n\t\t\t{seq}\n\t\t</sequence>\n'
        '\t\t<reactivity>\n\t\t\t{values}\n\t\t</reactivity>\n'
        '\t</transcript>\n'
        '</data>\n'.format(attrs=attrs, tid=transcript_id or path.stem,
                           length=len(sequence), seq=sequence, values=values),
        encoding="utf-8"
    )
    return path


@pytest.fixture
def xml_writer():
    """Provide the XML writer helper to tests."""
    return write_rf_xml


@pytest.fixture
def anticorrelated_pair(tmp_path):
    """Two single transcript files with perfectly anticorrelated profiles."""
    seq = "ACGTACGTAC"
    file1 = write_rf_xml(tmp_path / "rna1.xml", seq, range(1, 11))
    file2 = write_rf_xml(tmp_path / "rna2.xml", seq, range(10, 0, -1))
    return file1, file2
