import io

import pytest

from flowmaker.catalog.catalog import Catalog
from flowmaker.console.console import Console


class ScriptedConsole(Console):
    """Console fed from a list of answers that records everything written."""

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.prompts = []
        self.buffer = io.StringIO()
        super().__init__(input_fn=self._next_answer, output=self.buffer)

    def _next_answer(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError(prompt)
        return self.answers.pop(0)

    @property
    def text(self):
        return self.buffer.getvalue()

    @property
    def lines(self):
        return self.text.splitlines()


@pytest.fixture
def make_console():
    return ScriptedConsole


@pytest.fixture
def catalog(tmp_path):
    return Catalog(tmp_path / "flows.csv")
