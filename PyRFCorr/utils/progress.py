"""Terminal progress bar for processed transcripts.

The bar is drawn on stderr by the main process while it merges worker
reports. All bars can be switched off globally, which is the default when
stderr is not attached to a terminal.
"""
from __future__ import annotations

import sys
from typing import Any, TextIO


class ProgressBase:
    """Base class with a global enable/disable switch.

    Attributes:
        global_switch: Class-level flag to enable/disable all progress indicators
    """

    global_switch: bool = sys.stderr.isatty()

    @classmethod
    def _pass(cls, *args: Any, **kwargs: Any) -> None:
        pass


class ProgressBar(ProgressBase):
    """Single-line progress bar.

    Attributes:
        body: String defining the progress bar appearance
        fmt: Format string for displaying the progress bar
        output: Output stream for progress display
    """
    def __init__(
        self,
        output: TextIO = sys.stderr,
        body: str = "<1II1>" * 12,
        prefix: str = ">",
        suffix: str = "<",
    ) -> None:
        self.body = body
        self.fmt = "\r" + prefix + "{:<" + str(len(body)) + "}" + suffix + " {}"
        self.output = output
        self.name = ''
        self.pos = 0
        self._unit = 1.0
        self._next_update = 1.0

        if self.global_switch:
            self.enable_bar()
        else:
            self.disable_bar()

    def enable_bar(self) -> None:
        if self.global_switch:
            self.update = self._update
            self.clean = self._clean

    def disable_bar(self) -> None:
        self.update = self.clean = self._pass

    def set(self, name: str, maxval: float) -> None:
        """Reset the bar for a new operation reaching 100% at `maxval`."""
        self.name = name
        self._unit = float(maxval) / len(self.body)
        self.pos = 0
        self._next_update = self._unit

    def _update(self, val: float) -> None:
        if val >= self._next_update:
            while val >= self._next_update and self.pos < len(self.body):
                self.pos += 1
                self._next_update += self._unit
            self.output.write(self.fmt.format(self.body[:self.pos], self.name))
            self.output.flush()

    def _clean(self) -> None:
        self.output.write("\r\033[K")
        self.output.flush()
