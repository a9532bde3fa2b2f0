"""The interactive main menu."""

from __future__ import annotations

from pathlib import Path

from flowmaker.catalog.catalog import Catalog
from flowmaker.console.console import Console
from flowmaker.pipeline.builder import build_flow
from flowmaker.pipeline.flows import Flow, predefined_flows
from flowmaker.pipeline.runner import FlowExecutor
from flowmaker.pipeline.status import DONE, FAILED
from flowmaker.utils.logging import get_logger


logger = get_logger(__name__)

MENU = [
    "Choose an option from the following:",
    "1. Create a new flow",
    "2. Use the flow that has just been created",
    "3. Save the flow that has just been created",
    "4. Use a predefined flow",
    "5. Use a flow created by a user",
    "6. Delete flows",
    "0. Exit",
]


def show_catalog(console: Console, catalog: Catalog) -> None:
    for entry in catalog.entries():
        console.write(f"Flow Name: {entry.name}")
        console.write(f"Timestamp: {entry.timestamp}")
        console.write("Steps:")
        for tag in entry.tags:
            console.write(f"- {tag}")
        console.write()


class Menu:
    """State of one interactive session: the flow built most recently."""

    def __init__(self, console: Console, catalog: Catalog, *, base_dir: Path | str = ".") -> None:
        self.console = console
        self.catalog = catalog
        self.base_dir = Path(base_dir)
        self.flow = Flow("Default Flow")

    def run(self) -> int:
        """Loop until the operator picks 0; unexpected errors end the session."""
        try:
            while True:
                choice = self._ask_option()
                if choice == "0":
                    self.console.write("Exiting program...")
                    return DONE
                getattr(self, f"_option_{choice}")()
        except Exception as exc:
            logger.exception("menu: unexpected error")
            self.console.write(f"Error: {exc}")
            return FAILED

    def _ask_option(self) -> str:
        while True:
            for line in MENU:
                self.console.write(line)
            choice = self.console.read_char("Option: ")
            if choice and choice in "0123456":
                return choice

    def _execute(self, flow: Flow) -> int:
        return FlowExecutor(flow, self.console, base_dir=self.base_dir).run()

    def _option_1(self) -> None:
        self.flow = build_flow(self.console, self.catalog.names())

    def _option_2(self) -> None:
        if self.flow.is_empty():
            self.console.write("Error: No flow has been created yet.")
            return
        self.flow.display(self.console)
        if self.console.ask_yes_no("Are you sure you want to execute the flow? (Y/N): "):
            self._execute(self.flow)

    def _option_3(self) -> None:
        if self.flow.is_empty():
            self.console.write("Error: No flow has been created yet.")
            return
        if self.catalog.save(self.flow):
            self.console.write("Flow saved successfully!")
        else:
            self.console.write("Error: Unable to save the flow.")

    def _option_4(self) -> None:
        flows = predefined_flows()
        while True:
            self.console.write("Available predefined flows:")
            for number, flow in flows.items():
                self.console.write(f"{number}. {flow.name}")
                flow.display(self.console)
            self.console.write("0. Go back to the main menu")
            answer = self.console.read_line(
                f"Choose a predefined flow (1-{len(flows)}) or go back (0): "
            ).strip()
            if answer == "0":
                return
            if answer.isdigit() and int(answer) in flows:
                flow = flows[int(answer)]
                self.console.write(f"Using predefined flow: {flow.name}")
                self._execute(flow)
                return
            self.console.write("Error: Invalid choice. Please choose a valid predefined flow.")

    def _option_5(self) -> None:
        self.console.write("Flows available in CSV:")
        show_catalog(self.console, self.catalog)
        while True:
            name = self.console.read_line("Enter the name of the flow to use (or enter 0 to exit): ")
            if name == "0":
                return
            flow = self.catalog.load(name)
            if flow.is_empty():
                self.console.write(
                    "Error: Flow not found. Please enter a valid flow name or enter 0 to exit."
                )
                continue
            flow.display(self.console)
            self._execute(flow)
            return

    def _option_6(self) -> None:
        names = self.catalog.names()
        if not names:
            self.console.write("Error: No flows available for deletion.")
            return
        self.console.write("Flows available in CSV:")
        show_catalog(self.console, self.catalog)
        while True:
            name = self.console.read_line("Enter the name of the flow to delete (or enter 0 to exit): ")
            if name == "0":
                return
            if name not in names:
                self.console.write(
                    "Error: Flow not found. Please enter a valid flow name or enter 0 to exit."
                )
                continue
            if self.catalog.delete(name):
                self.console.write(f"Flow '{name}' deleted successfully!")
            else:
                self.console.write(f"Error: Unable to delete flow '{name}'.")
            return
