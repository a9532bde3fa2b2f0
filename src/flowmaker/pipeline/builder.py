"""Interactive construction of a new flow."""

from __future__ import annotations

from typing import Callable, Dict, Iterable

from flowmaker.catalog.catalog import is_valid_flow_name
from flowmaker.console.console import Console
from flowmaker.pipeline.flows import Flow, display_available_steps
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


def _described(cls: type, tag: str) -> Callable[[Console], Step]:
    def build(console: Console) -> Step:
        return cls(console.read_line(f"Enter description for {tag}: "))

    return build


# Menu key -> builder of the step to append; "0" (End) is handled separately.
STEP_CHOICES: Dict[str, Callable[[Console], Step]] = {
    "1": lambda console: TitleStep(),
    "2": lambda console: TextStep(),
    "3": _described(TextInputStep, "TextInputStep"),
    "4": _described(NumberInputStep, "NumberInputStep"),
    "5": lambda console: CalculusStep(),
    "6": lambda console: DisplayStep(),
    "7": _described(TextFileInputStep, "TextFileInputStep"),
    "8": _described(CSVFileInputStep, "CSVFileInputStep"),
    "9": lambda console: OutputStep(),
}


def ask_flow_name(console: Console, existing: Iterable[str]) -> str:
    taken = set(existing)
    while True:
        name = console.read_line("Enter flow name: ")
        if name in taken:
            console.write("Error: Flow name already exists. Please choose a different name.")
        elif not is_valid_flow_name(name):
            console.write("Error: Flow name must not be empty or contain commas.")
        else:
            return name


def build_flow(console: Console, existing_names: Iterable[str] = ()) -> Flow:
    """Ask for a name and steps until the operator picks End."""
    flow = Flow(ask_flow_name(console, existing_names))
    while True:
        display_available_steps(console)
        choice = console.read_char("Which step do you want to add? (0-9): ")
        if choice == "0":
            flow.add_step(EndStep())
            console.write("Flow Creation Finished!")
            flow.display(console)
            break
        factory = STEP_CHOICES.get(choice)
        if factory is None:
            continue
        flow.add_step(factory(console))
    logger.info("builder: created flow %s with %s", flow.name, ", ".join(flow.kinds()))
    return flow
