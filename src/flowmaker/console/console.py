"""Line-oriented console primitives used by every interactive protocol."""

from __future__ import annotations

import sys
from typing import Callable, TextIO


class Console:
    """Reads operator answers and writes prompts/results.

    *input_fn* must behave like :func:`input` (prompt in, line out, ``EOFError``
    at end of input). *output* is any text stream.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] | None = None,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_fn or input
        self._output = output or sys.stdout

    def write(self, text: str = "") -> None:
        self._output.write(text + "\n")
        self._output.flush()

    def read_line(self, prompt: str) -> str:
        return self._input(prompt)

    def read_char(self, prompt: str) -> str:
        """Return the first non-blank character of the answer, or ``""``."""
        answer = self.read_line(prompt).strip()
        return answer[:1]

    def ask_yes_no(self, prompt: str) -> bool:
        return self.read_char(prompt) in ("Y", "y")
