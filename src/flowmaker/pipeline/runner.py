"""Interactive runner that walks a flow's steps once, in order."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Dict, List

from flowmaker.collectors.files import (
    ensure_suffix,
    is_valid_filename,
    read_csv_rows,
    read_text_lines,
)
from flowmaker.console.console import Console
from flowmaker.pipeline.flows import Flow
from flowmaker.pipeline.status import DONE, FAILED, SKIPPED
from flowmaker.steps.steps import (
    NO_OPERANDS,
    OPERAND_COUNT,
    OPERATION_PROMPT,
    CalculusStep,
    CSVFileInputStep,
    NumberInputStep,
    Operation,
    OutputStep,
    Step,
    StepKind,
    TextFileInputStep,
    TextStep,
    TitleStep,
    format_number,
)
from flowmaker.utils.logging import get_logger


logger = get_logger(__name__)


class FlowExecutor:
    """Runs one flow against an operator console.

    Each step is announced and gated by a Y/N question; accepted steps run
    the protocol registered for their kind in :attr:`HANDLERS`. Steps only
    ever look at the steps before them. Relative file names are resolved
    against *base_dir*.
    """

    HANDLERS: Dict[StepKind, str] = {
        StepKind.TITLE: "_run_title",
        StepKind.TEXT: "_run_text",
        StepKind.TEXT_INPUT: "_run_text_input",
        StepKind.NUMBER_INPUT: "_run_number_input",
        StepKind.CALCULUS: "_run_calculus",
        StepKind.DISPLAY: "_run_display",
        StepKind.TEXT_FILE_INPUT: "_run_file_input",
        StepKind.CSV_FILE_INPUT: "_run_file_input",
        StepKind.OUTPUT: "_run_output",
        StepKind.END: "_run_end",
    }

    # Kinds that run without asking first
    UNGATED = {StepKind.END}

    def __init__(self, flow: Flow, console: Console, *, base_dir: Path | str = ".") -> None:
        self.flow = flow
        self.console = console
        self.base_dir = Path(base_dir)
        self.output_lines: List[str] = []

    def run(self) -> int:
        """Execute the flow once; return DONE, or FAILED if the run broke off."""
        logger.info("flow=%s status=start steps=%d", self.flow.name, len(self.flow))
        try:
            for index, step in enumerate(self.flow.steps):
                self._run_step(index, step)
        except Exception as exc:
            logger.exception("flow=%s status=error", self.flow.name)
            self.console.write(f"Error: {exc}")
            return FAILED
        logger.info("flow=%s status=done", self.flow.name)
        return DONE

    def _run_step(self, index: int, step: Step) -> int:
        start = time.perf_counter()
        logger.info("▶ step=%s index=%d status=start", step.tag, index)
        self.console.write(f"{index + 1}. {step.tag}: {step.describe()}")

        if step.KIND not in self.UNGATED and not self.console.ask_yes_no(
            "Do you want to complete this step? (Y/N): "
        ):
            self.console.write("Step skipped.")
            code = SKIPPED
        else:
            handler: Callable[[int, Step], int] = getattr(self, self.HANDLERS[step.KIND])
            code = handler(index, step)

        duration = time.perf_counter() - start
        if code == DONE:
            logger.info("✓ step=%s index=%d status=done duration=%.3fs", step.tag, index, duration)
        elif code == SKIPPED:
            logger.info(
                "⏭ step=%s index=%d status=skipped reason=declined duration=%.3fs",
                step.tag,
                index,
                duration,
            )
        else:
            logger.info("✖ step=%s index=%d status=error duration=%.3fs", step.tag, index, duration)
        return code

    def _previous(self, index: int) -> tuple[Step, ...]:
        return self.flow.steps[:index]

    # --- title / text -----------------------------------------------------

    def _run_title(self, index: int, step: TitleStep) -> int:
        step.completed = True
        return DONE

    def _run_text(self, index: int, step: TextStep) -> int:
        step.completed = True
        step.position = index
        return DONE

    def _run_text_input(self, index: int, step: Step) -> int:
        self.console.write("The text you need to complete:")
        found = False
        for previous in self._previous(index):
            if isinstance(previous, TitleStep) and previous.completed:
                found = True
                previous.title = self.console.read_line("Enter Title: ")
                previous.subtitle = self.console.read_line("Enter Subtitle: ")
            elif isinstance(previous, TextStep) and previous.completed:
                found = True
                previous.title = self.console.read_line("Enter Text Title: ")
                previous.text = self.console.read_line("Enter Text: ")
        if not found:
            self.console.write("No step to input")
        return DONE

    # --- numbers ----------------------------------------------------------

    def _run_number_input(self, index: int, step: NumberInputStep) -> int:
        while not step.accept(self.console.read_line("Enter a number: ")):
            self.console.write("Invalid input. Please enter a valid number.")
        self.console.write(f"Number entered is: {format_number(step.value)}")
        return DONE

    def _run_calculus(self, index: int, step: CalculusStep) -> int:
        self.console.write("Choose two number inputs for the calculation:")
        steps = self.flow.steps
        candidates = [
            j for j, previous in enumerate(self._previous(index))
            if isinstance(previous, NumberInputStep)
        ]
        if not candidates:
            return self._calculus_failed(step, NO_OPERANDS)

        # The scan starts over after every pick, so one input may be used twice.
        selected: list[int] = []
        picked = True
        while picked and len(selected) < 2:
            picked = False
            for j in candidates:
                if self.console.ask_yes_no(
                    f"Select Number Input Step {j + 1}? "
                    f"(Number is: {format_number(steps[j].value)}) (Y/N): "  # type: ignore[attr-defined]
                ):
                    selected.append(j)
                    picked = True
                    break

        if len(selected) != 2:
            return self._calculus_failed(step, OPERAND_COUNT)

        step.bind(selected, index, steps)
        prompt = f"Choose the arithmetic operation {OPERATION_PROMPT}: "
        retry = f"Invalid symbol. Please choose a valid arithmetic operation {OPERATION_PROMPT}: "
        operation = Operation.from_symbol(self.console.read_char(prompt))
        while operation is None:
            operation = Operation.from_symbol(self.console.read_char(retry))
        step.operation = operation

        outcome = step.compute(steps)
        if not outcome.ok:
            logger.warning("calculus: step=%d error=%s", index, outcome.error)
            self.console.write(f"Error: {outcome.message}")
            return FAILED
        self.console.write(f"Calculation Result: {format_number(outcome.value)}")  # type: ignore[arg-type]
        return DONE

    def _calculus_failed(self, step: CalculusStep, error: str) -> int:
        outcome = step.fail(error)
        logger.warning("calculus: error=%s", error)
        self.console.write(f"Error: {outcome.message}")
        return FAILED

    # --- display ----------------------------------------------------------

    def _run_display(self, index: int, step: Step) -> int:
        self.console.write("Display of the input so far:")
        lines = self.display_lines(index)
        if not lines:
            self.console.write("Nothing to display.")
        for line in lines:
            self.console.write(line)
        return DONE

    def display_lines(self, index: int) -> list[str]:
        """Summaries of every recognised step before *index*."""
        steps = self.flow.steps
        counters: Dict[StepKind, int] = {}
        lines: list[str] = []
        for previous in self._previous(index):
            if previous.KIND not in RENDERED_KINDS:
                continue
            n = counters[previous.KIND] = counters.get(previous.KIND, 0) + 1
            if isinstance(previous, TitleStep):
                lines.append(f"Title {n}: {previous.title}")
                lines.append(f"Subtitle {n}: {previous.subtitle}")
            elif isinstance(previous, TextStep):
                lines.append(f"Text title {n}: {previous.title}")
                lines.append(f"Text {n}: {previous.text}")
            elif isinstance(previous, NumberInputStep):
                lines.append(f"Number Input {n}: {format_number(previous.value)}")
            elif isinstance(previous, CalculusStep):
                lines.append(f"Calculus Step {n}: {previous.expression(steps)}")
            elif isinstance(previous, TextFileInputStep):
                if previous.imported:
                    lines.append(f"Text File {n} name: {previous.filename}")
                    lines.append(f"Text File {n} content: \n{previous.content}")
                else:
                    lines.append(f"Text File {n} was not imported successfully.")
            elif isinstance(previous, CSVFileInputStep):
                if previous.imported:
                    lines.append(f"CSV File {n} name: {previous.filename}")
                    lines.append(f"CSV File {n} content: ")
                    lines.extend(previous.row_lines())
                else:
                    lines.append(f"CSV File {n} was not imported successfully.")
        return lines

    # --- file import ------------------------------------------------------

    def _ask_filename(self, prompt: str, error: str) -> str:
        name = self.console.read_line(prompt)
        while not is_valid_filename(name):
            self.console.write(error)
            name = self.console.read_line(prompt)
        return name

    def _run_file_input(self, index: int, step: TextFileInputStep | CSVFileInputStep) -> int:
        is_csv = isinstance(step, CSVFileInputStep)
        label = "CSV file" if is_csv else "text file"
        name = self._ask_filename(
            f"Enter the name of the {label} ({step.SUFFIX}): ",
            f"Invalid file name. Please enter a valid {label} name.",
        )
        name = ensure_suffix(name, step.SUFFIX)
        step.filename = name
        self.console.write(f"Entered File Name: {name}")

        path = self.base_dir / name
        try:
            if isinstance(step, CSVFileInputStep):
                step.load(read_csv_rows(path))
            else:
                step.load(read_text_lines(path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("import: unable to read %s: %s", path, exc)
            step.imported = False
            self.console.write("File not found or unable to open.")
            return FAILED
        logger.info("import: %s loaded from %s", step.tag, path)
        if is_csv:
            self.console.write("CSV file imported successfully.")
        else:
            self.console.write("File imported successfully.")
        return DONE

    # --- output -----------------------------------------------------------

    def _run_output(self, index: int, step: OutputStep) -> int:
        filename = self._ask_filename(
            "Enter filename for the output: ",
            "Error: Invalid filename. Please enter a valid filename.",
        )
        title = self.console.read_line("Enter title for the output: ")
        description = self.console.read_line("Enter description for the output: ")

        self.output_lines = self.collect_output(index)
        step.filename = str(self.base_dir / filename)
        step.title = title
        step.description = description
        step.lines = list(self.output_lines)
        return step.execute(self.console)

    def collect_output(self, index: int) -> list[str]:
        """Ask, step by step, what goes into the report and return its lines."""
        steps = self.flow.steps
        counters: Dict[StepKind, int] = {}
        lines: list[str] = []
        for previous in self._previous(index):
            if previous.KIND not in RENDERED_KINDS:
                continue
            n = counters[previous.KIND] = counters.get(previous.KIND, 0) + 1
            what = OUTPUT_QUESTIONS[previous.KIND]
            if not self.console.ask_yes_no(
                f"Do you want to output the {what} of the {previous.tag} {n}? (Y/N): "
            ):
                continue
            if isinstance(previous, TitleStep):
                lines.append(f"Title {n}: {previous.title}")
                lines.append(f"Subtitle {n}: {previous.subtitle}")
            elif isinstance(previous, TextStep):
                lines.append(f"Text Title {n}: {previous.title}")
                lines.append(f"Text {n}: {previous.text}")
            elif isinstance(previous, NumberInputStep):
                lines.append(f"Number Input {n}: {format_number(previous.value)}")
            elif isinstance(previous, CalculusStep):
                lines.append(f"Calculus Result {n}: {previous.expression(steps)}")
            elif isinstance(previous, TextFileInputStep):
                lines.append(f"Name of the Text File Input {n}: {previous.filename}")
                lines.append(f"Content of the Text File Input {n}: ")
                lines.append(previous.content)
            elif isinstance(previous, CSVFileInputStep):
                lines.append(f"Name of the CSV File Input {n}: {previous.filename}")
                lines.append(f"Content of the CSV File Input {n}: ")
                lines.extend(previous.row_lines())
        return lines

    # --- end --------------------------------------------------------------

    def _run_end(self, index: int, step: Step) -> int:
        self.console.write("Flow Completed!")
        self.flow.reset()
        logger.info("flow=%s reset after %s", self.flow.name, step.tag)
        return DONE


RENDERED_KINDS = {
    StepKind.TITLE,
    StepKind.TEXT,
    StepKind.NUMBER_INPUT,
    StepKind.CALCULUS,
    StepKind.TEXT_FILE_INPUT,
    StepKind.CSV_FILE_INPUT,
}

OUTPUT_QUESTIONS = {
    StepKind.TITLE: "title and subtitle",
    StepKind.TEXT: "title and text",
    StepKind.NUMBER_INPUT: "number",
    StepKind.CALCULUS: "calculus",
    StepKind.TEXT_FILE_INPUT: "text contents",
    StepKind.CSV_FILE_INPUT: "text contents",
}
