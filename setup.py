#!/usr/bin/env python
"""
PyRFCorr Setup Script
"""

import re
from pathlib import Path
from setuptools import setup, find_packages

#
BASEDIR = Path(__file__).parent.absolute()


def _get_version():
    """Read VERSION from the package without importing it."""
    init = (BASEDIR / "PyRFCorr" / "__init__.py").read_text(encoding="utf-8")
    match = re.search(r'^VERSION = "([^"]+)"', init, re.MULTILINE)
    if match is None:
        raise RuntimeError("Unable to find VERSION in PyRFCorr/__init__.py")
    return match.group(1)


def _setup():
    setup(
        name="PyRFCorr",
        version=_get_version(),
        description="Parallel per-transcript correlation of RNA structure probing reactivity profiles",
        packages=find_packages(include=["PyRFCorr", "PyRFCorr.*"]),
        python_requires=">=3.8",
        install_requires=[
            "numpy>=1.20",
            "scipy",
            "typing_extensions",
        ],
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": [
                "pyrfcorr = PyRFCorr.rfcorr:main",
            ],
        },
    )


if __name__ == "__main__":
    _setup()
