"""The Flow container and the predefined sample flows."""

from __future__ import annotations

from typing import Callable, Dict, Iterator, Optional, Sequence

from flowmaker.console.console import Console
from flowmaker.steps.steps import (
    CalculusStep,
    CSVFileInputStep,
    DisplayStep,
    EndStep,
    NumberInputStep,
    OutputStep,
    Step,
    TextFileInputStep,
    TextInputStep,
    TextStep,
    TitleStep,
)
from flowmaker.utils.logging import get_logger


logger = get_logger(__name__)


class Flow:
    """A named, ordered list of steps.

    The flow owns its steps. Later steps refer to earlier ones only by their
    index in :attr:`steps`, so positions never change once a step is added.
    """

    def __init__(self, name: str, steps: Sequence[Step] = ()) -> None:
        self.name = name
        self._steps: list[Step] = []
        for step in steps:
            self.add_step(step)

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    def add_step(self, step: Step) -> Optional[Step]:
        try:
            self._steps.append(step)
        except MemoryError as exc:
            logger.error("flow %s: unable to add %s: %s", self.name, step.tag, exc)
            return None
        return step

    def kinds(self) -> list[str]:
        return [step.tag for step in self._steps]

    def reset(self) -> None:
        for step in self._steps:
            step.reset()

    def is_empty(self) -> bool:
        return not self._steps

    def display(self, console: Console) -> None:
        console.write("\tFlow Steps:")
        for i, step in enumerate(self._steps, start=1):
            console.write(f"\t{i}. {step.tag}")

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> Step:
        return self._steps[index]

    def __repr__(self) -> str:
        return f"Flow(name={self.name!r}, steps={self.kinds()!r})"


AVAILABLE_STEPS = [
    ("1", "TitleStep", "Step with a title and subtitle."),
    ("2", "TextStep", "Step with a title and text."),
    ("3", "TextInputStep", "Step which allows the user to input a title and text."),
    ("4", "NumberInputStep", "Step to input a number."),
    ("5", "CalculusStep", "Step to perform arithmetic operations."),
    ("6", "DisplayStep", "Step which displays the input for each of the steps until now."),
    ("7", "TextFileInputStep", "Step which lets the user input a .txt file."),
    ("8", "CSVFileInputStep", "Step which lets the user input a .csv file."),
    ("9", "OutputStep", "Step which lets the user output a .txt file with the information they want."),
    ("0", "EndStep", "Step which is added automatically after finishing the flow."),
]


def display_available_steps(console: Console) -> None:
    console.write("Available Steps:")
    for key, tag, about in AVAILABLE_STEPS:
        console.write(f"{key}. {tag}: {about}")


_FILL_IN = "Input title, subtitle, title text and text"
_NUMBER = "Input a number"


def _predefined_flow_1() -> Flow:
    return Flow(
        "Predefined Flow 1",
        [
            TitleStep(),
            TextStep(),
            TextInputStep(_FILL_IN),
            NumberInputStep(_NUMBER),
            NumberInputStep(_NUMBER),
            CalculusStep(),
            DisplayStep(),
            TextFileInputStep("Input a .txt file"),
            CSVFileInputStep("Input a .csv file"),
            OutputStep(),
            EndStep(),
        ],
    )


def _predefined_flow_2() -> Flow:
    return Flow(
        "Predefined Flow 2",
        [
            TitleStep(),
            TextStep(),
            TitleStep(),
            TextStep(),
            TextInputStep(_FILL_IN),
            TextInputStep(_FILL_IN),
            DisplayStep(),
            OutputStep(),
            EndStep(),
        ],
    )


def _predefined_flow_3() -> Flow:
    return Flow(
        "Predefined Flow 3",
        [
            NumberInputStep(_NUMBER),
            NumberInputStep(_NUMBER),
            NumberInputStep(_NUMBER),
            NumberInputStep(_NUMBER),
            CalculusStep(),
            CalculusStep(),
            DisplayStep(),
            OutputStep(),
            EndStep(),
        ],
    )


def _predefined_flow_4() -> Flow:
    return Flow(
        "Predefined Flow 4",
        [
            TextFileInputStep("Input a .txt file"),
            CSVFileInputStep("Input a .csv file"),
            DisplayStep(),
            OutputStep(),
            EndStep(),
        ],
    )


# Sample flows offered by the menu, keyed by their menu number.
PREDEFINED_FLOWS: Dict[int, Callable[[], Flow]] = {
    1: _predefined_flow_1,
    2: _predefined_flow_2,
    3: _predefined_flow_3,
    4: _predefined_flow_4,
}


def predefined_flows() -> Dict[int, Flow]:
    """Build a fresh copy of every sample flow."""
    return {number: factory() for number, factory in PREDEFINED_FLOWS.items()}
