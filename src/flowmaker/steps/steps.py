"""The ten step kinds a flow is built from.

Every kind is a dataclass deriving from :class:`Step`. Field defaults are the
values a freshly built step carries, and :meth:`Step.reset` restores exactly
those. Steps never hold references to other steps: a calculus step stores the
indices of its operands and resolves them through the owning flow's step
list when it needs their values.
"""

from __future__ import annotations

import copy
import math
from dataclasses import MISSING, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import ClassVar, Dict, List, Optional, Sequence

from flowmaker.collectors.files import resolve_report_path, write_report
from flowmaker.console.console import Console
from flowmaker.pipeline.status import DONE, FAILED
from flowmaker.utils.logging import get_logger


logger = get_logger(__name__)


class StepKind(str, Enum):
    TITLE = "TitleStep"
    TEXT = "TextStep"
    TEXT_INPUT = "TextInputStep"
    NUMBER_INPUT = "NumberInputStep"
    CALCULUS = "CalculusStep"
    DISPLAY = "DisplayStep"
    TEXT_FILE_INPUT = "TextFileInputStep"
    CSV_FILE_INPUT = "CSVFileInputStep"
    OUTPUT = "OutputStep"
    END = "EndStep"


class Operation(Enum):
    """Arithmetic operations a calculus step can apply, keyed by symbol."""

    ADDITION = "+"
    SUBTRACTION = "-"
    MULTIPLICATION = "*"
    DIVISION = "/"
    MINIMUM = "m"
    MAXIMUM = "M"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def is_function(self) -> bool:
        return self in (Operation.MINIMUM, Operation.MAXIMUM)

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Operation"]:
        for op in cls:
            if op.value == symbol:
                return op
        return None


OPERATION_PROMPT = "(+, -, *, /, m (min), M (max))"

# Reasons a calculation produced no value
DIVISION_BY_ZERO = "division_by_zero"
NO_OPERANDS = "no_operands"
OPERAND_COUNT = "operand_count"

ERROR_MESSAGES = {
    DIVISION_BY_ZERO: "Division by zero detected. Skipping.",
    NO_OPERANDS: "No number input step from previous steps. Cancelling calculation.",
    OPERAND_COUNT: "Invalid number of selected inputs. Cancelling calculation.",
}


@dataclass
class CalcResult:
    value: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return ERROR_MESSAGES.get(self.error or "", self.error or "")


def calculate(operation: Operation, values: Sequence[float]) -> CalcResult:
    """Left-fold *values* with *operation*.

    Addition starts from 0 and multiplication from 1; every other operation
    uses the first value as seed. A zero divisor after the seed fails the
    whole computation and no partial value is returned.
    """

    if operation is Operation.ADDITION:
        return CalcResult(value=float(sum(values, 0.0)))
    if operation is Operation.MULTIPLICATION:
        result = 1.0
        for v in values:
            result *= v
        return CalcResult(value=result)
    if not values:
        return CalcResult(value=0.0)

    result = float(values[0])
    for v in values[1:]:
        if operation is Operation.SUBTRACTION:
            result -= v
        elif operation is Operation.DIVISION:
            if v == 0:
                return CalcResult(error=DIVISION_BY_ZERO)
            result /= v
        elif operation is Operation.MINIMUM:
            result = min(result, v)
        elif operation is Operation.MAXIMUM:
            result = max(result, v)
    return CalcResult(value=result)


def format_number(value: float) -> str:
    return f"{value:g}"


@dataclass
class Step:
    """Base of every step kind."""

    KIND: ClassVar[StepKind]
    DESCRIPTION: ClassVar[str] = ""

    @property
    def tag(self) -> str:
        return self.KIND.value

    def describe(self) -> str:
        return self.DESCRIPTION

    def execute(self, console: Console) -> int:
        """Print the step's current fields without asking anything."""
        return DONE

    def clone(self) -> Optional["Step"]:
        try:
            return copy.deepcopy(self)
        except MemoryError as exc:
            logger.error("step: unable to clone %s: %s", self.tag, exc)
            return None

    def reset(self) -> None:
        for f in fields(self):
            if f.default is not MISSING:
                setattr(self, f.name, f.default)
            elif f.default_factory is not MISSING:  # type: ignore[misc]
                setattr(self, f.name, f.default_factory())  # type: ignore[misc]


@dataclass
class TitleStep(Step):
    KIND: ClassVar[StepKind] = StepKind.TITLE
    DESCRIPTION: ClassVar[str] = "Step with a title and subtitle."

    title: str = "Default Title for TitleStep"
    subtitle: str = "Default Subtitle for TitleStep"
    completed: bool = False

    def execute(self, console: Console) -> int:
        console.write(f"Title: {self.title}")
        console.write(f"Subtitle: {self.subtitle}")
        return DONE


@dataclass
class TextStep(Step):
    KIND: ClassVar[StepKind] = StepKind.TEXT
    DESCRIPTION: ClassVar[str] = "Step with a title for the text and text."

    title: str = "Default Title for TextStep"
    text: str = "Default text for TextStep"
    completed: bool = False
    position: Optional[int] = None

    def execute(self, console: Console) -> int:
        console.write(f"Text Title: {self.title}")
        console.write(f"Text: {self.text}")
        return DONE


@dataclass
class TextInputStep(Step):
    KIND: ClassVar[StepKind] = StepKind.TEXT_INPUT

    description: str = "Default Description"

    def describe(self) -> str:
        return (
            "Step to input the text.\n"
            f"Description of the user that created the step: {self.description}"
        )

    def execute(self, console: Console) -> int:
        console.write(f"Text Input Step Description: {self.description}")
        return DONE


@dataclass
class NumberInputStep(Step):
    KIND: ClassVar[StepKind] = StepKind.NUMBER_INPUT

    description: str = "Default Number Input Description"
    value: float = 0.0

    def describe(self) -> str:
        return (
            "Step to input a number.\n"
            f"Description of the user that created this step: {self.description}"
        )

    def execute(self, console: Console) -> int:
        console.write(f"Number Input Step Description: {self.description}")
        return DONE

    def accept(self, text: str) -> bool:
        """Store *text* as the value if it is a finite number."""
        try:
            value = float(text.strip())
        except ValueError:
            return False
        if not math.isfinite(value):
            return False
        self.value = value
        return True


@dataclass
class CalculusStep(Step):
    KIND: ClassVar[StepKind] = StepKind.CALCULUS
    DESCRIPTION: ClassVar[str] = (
        f"Step to perform arithmetic operations. {OPERATION_PROMPT}"
    )

    operation: Operation = Operation.ADDITION
    operands: List[int] = field(default_factory=list)
    result: Optional[float] = None
    error: Optional[str] = None

    @property
    def operation_symbol(self) -> str:
        return self.operation.symbol

    def bind(self, operands: Sequence[int], own_index: int, steps: Sequence[Step]) -> None:
        """Point the step at earlier number inputs, kept in flow order.

        The same index may appear more than once (``x * x``).
        """
        for idx in operands:
            if not 0 <= idx < own_index:
                raise ValueError(
                    f"operand index {idx} is not before calculus step {own_index}"
                )
            if not isinstance(steps[idx], NumberInputStep):
                raise ValueError(f"step {idx} is not a {StepKind.NUMBER_INPUT.value}")
        self.operands = sorted(operands)

    def operand_values(self, steps: Sequence[Step]) -> list[float]:
        return [steps[idx].value for idx in self.operands]  # type: ignore[attr-defined]

    def evaluate(self, steps: Sequence[Step]) -> CalcResult:
        return calculate(self.operation, self.operand_values(steps))

    def compute(self, steps: Sequence[Step]) -> CalcResult:
        """Evaluate and remember the outcome on the step."""
        outcome = self.evaluate(steps)
        self.result = outcome.value
        self.error = outcome.error
        return outcome

    def fail(self, error: str) -> CalcResult:
        self.operands = []
        self.result = None
        self.error = error
        return CalcResult(error=error)

    def expression(self, steps: Sequence[Step]) -> str:
        """Render e.g. ``2 + 3 = 5`` or ``min(2, 3) = 2`` from current values.

        A step whose selection failed has no operands and renders only the
        recorded error; one that never ran renders as not computed.
        """
        if not self.operands:
            if self.error:
                return f"error ({ERROR_MESSAGES.get(self.error, self.error)})"
            return "not computed"
        values = [format_number(v) for v in self.operand_values(steps)]
        if self.operation.is_function:
            name = "min" if self.operation is Operation.MINIMUM else "max"
            text = f"{name}({', '.join(values)})"
        else:
            text = f" {self.operation.symbol} ".join(values)
        outcome = self.evaluate(steps)
        if outcome.ok:
            return f"{text} = {format_number(outcome.value)}"  # type: ignore[arg-type]
        return f"{text} = error ({outcome.message})"

    def execute(self, console: Console) -> int:
        console.write(f"Performing Calculus Step: {self.operation.label}")
        if self.error:
            console.write(f"Error: {ERROR_MESSAGES.get(self.error, self.error)}")
            return FAILED
        if self.result is not None:
            console.write(f"Result: {format_number(self.result)}")
        return DONE


@dataclass
class DisplayStep(Step):
    KIND: ClassVar[StepKind] = StepKind.DISPLAY
    DESCRIPTION: ClassVar[str] = "Displaying the flow."

    def execute(self, console: Console) -> int:
        console.write("Displaying the Flow")
        return DONE


@dataclass
class TextFileInputStep(Step):
    KIND: ClassVar[StepKind] = StepKind.TEXT_FILE_INPUT
    SUFFIX: ClassVar[str] = ".txt"

    description: str = "Default Description"
    filename: str = ""
    imported: bool = False
    content: str = ""

    def describe(self) -> str:
        return (
            "Step to input a text file (.txt).\n"
            f"Description of the user that created the step: {self.description}"
        )

    def load(self, lines: Sequence[str]) -> None:
        self.imported = True
        self.content = "".join(f"{line}\n" for line in lines)

    def execute(self, console: Console) -> int:
        status = "imported" if self.imported else "not imported"
        console.write(f"Text File Input: {self.filename or '-'} ({status})")
        return DONE


@dataclass
class CSVFileInputStep(Step):
    KIND: ClassVar[StepKind] = StepKind.CSV_FILE_INPUT
    SUFFIX: ClassVar[str] = ".csv"

    description: str = "Default Description"
    filename: str = ""
    imported: bool = False
    rows: List[List[str]] = field(default_factory=list)

    def describe(self) -> str:
        return (
            "Step to input a CSV file (.csv).\n"
            f"Description of the user that created the step: {self.description}"
        )

    def load(self, rows: Sequence[Sequence[str]]) -> None:
        self.imported = True
        self.rows = [list(row) for row in rows]

    def row_lines(self) -> list[str]:
        return [", ".join(row) for row in self.rows]

    def execute(self, console: Console) -> int:
        status = "imported" if self.imported else "not imported"
        console.write(f"CSV File Input: {self.filename or '-'} ({status})")
        return DONE


@dataclass
class OutputStep(Step):
    KIND: ClassVar[StepKind] = StepKind.OUTPUT
    DESCRIPTION: ClassVar[str] = "Step to output a text file (.txt)."

    filename: str = "Default File Name"
    title: str = "Default File Title"
    description: str = "Default File Description"
    lines: List[str] = field(default_factory=list)

    def execute(self, console: Console) -> int:
        """Write the report, never overwriting an existing file."""
        try:
            path = resolve_report_path(Path(self.filename))
            write_report(path, self.title, self.description, self.lines)
        except OSError as exc:
            logger.error("output: unable to write %s: %s", self.filename, exc)
            console.write("Error: Unable to open the output file for writing.")
            return FAILED
        self.filename = str(path)
        console.write(f"Output file '{path}' created successfully.")
        return DONE


@dataclass
class EndStep(Step):
    KIND: ClassVar[StepKind] = StepKind.END
    DESCRIPTION: ClassVar[str] = "End of the flow."

    def execute(self, console: Console) -> int:
        console.write("End of Flow")
        return DONE


STEP_TYPES: Dict[str, type] = {
    cls.KIND.value: cls
    for cls in (
        TitleStep,
        TextStep,
        TextInputStep,
        NumberInputStep,
        CalculusStep,
        DisplayStep,
        TextFileInputStep,
        CSVFileInputStep,
        OutputStep,
        EndStep,
    )
}


def new_step(tag: str) -> Optional[Step]:
    """Return a default-built step for *tag*, or None when the tag is unknown."""
    cls = STEP_TYPES.get(tag)
    if cls is None:
        return None
    return cls()
