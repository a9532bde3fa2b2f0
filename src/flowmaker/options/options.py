from __future__ import annotations

import argparse
from typing import Dict, List

from flowmaker.catalog.catalog import Catalog
from flowmaker.config.config import catalog_path, files_dir, load_config
from flowmaker.console.console import Console
from flowmaker.pipeline.status import DONE, FAILED, USAGE
from flowmaker.utils.logging import get_logger, setup_logging


# Option name -> about, arguments, examples and handler
_OPTIONS: Dict[str, Dict[str, object]] = {}

logger = get_logger(__name__)

SCRIPT = "python3 scripts/flowmaker_cli.py"

_CONFIG_HELP = "YAML configuration file (default configs/flowmaker.yml)"


class _OptionArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises exceptions instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise ValueError(message)


def _examples_epilog(spec: Dict[str, object]) -> str | None:
    examples = spec.get("examples")
    if not examples:
        return None
    lines = ["examples:"]
    for desc, cmd in examples:  # type: ignore[attr-defined]
        lines.append(f"  {cmd}")
        lines.append(f"      {desc}")
    return "\n".join(lines)


def _build_parser(option: str) -> _OptionArgumentParser:
    """Parser for one option; its help text is the option's help page."""
    spec = get_options()[option]
    parser = _OptionArgumentParser(
        prog=f"{SCRIPT} {option}",
        description=str(spec["about"]),
        epilog=_examples_epilog(spec),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    for name, kwargs in spec.get("arguments", ()):  # type: ignore[attr-defined]
        parser.add_argument(name, **kwargs)
    if spec.get("config", True):
        parser.add_argument("--config", metavar="PATH", help=_CONFIG_HELP)
    return parser


def _parse(option: str, args: List[str]) -> argparse.Namespace | None:
    try:
        return _build_parser(option).parse_args(args)
    except ValueError as exc:
        logger.error("%s: %s", option, exc)
        logger.error("Hint: see '%s help %s'", SCRIPT, option)
        return None


def _print_overview() -> None:
    options = get_options()
    width = max(len(name) for name in options)
    print(f"usage: {SCRIPT} [<option> [arguments]]")
    print()
    print("Build, save and run step-by-step console flows.")
    print("Without an option the interactive menu starts.")
    print()
    print("options:")
    for name, spec in options.items():
        print(f"  {name:<{width}}  {spec['about']}")
    print()
    print(f"Run '{SCRIPT} help <option>' for the arguments of one option.")


def _help_handler(args: List[str]) -> int:
    if not args:
        _print_overview()
        return DONE
    name = args[0]
    if name not in get_options():
        print(f"Unknown option for help: {name}")
        _print_overview()
        return USAGE
    print(_build_parser(name).format_help(), end="")
    return DONE


def _session(ns: argparse.Namespace) -> tuple[dict, Catalog, Console]:
    config = load_config(ns.config)
    setup_logging(config["logging"]["level"], config["logging"]["file"])
    return config, Catalog(catalog_path(config)), Console()


def _menu_handler(args: List[str]) -> int:
    from flowmaker.options.menu import Menu

    ns = _parse("menu", args)
    if ns is None:
        return USAGE
    config, catalog, console = _session(ns)
    return Menu(console, catalog, base_dir=files_dir(config)).run()


def _list_handler(args: List[str]) -> int:
    from flowmaker.options.menu import show_catalog

    ns = _parse("list", args)
    if ns is None:
        return USAGE
    _, catalog, console = _session(ns)
    if not catalog.names():
        console.write("No flows saved yet.")
        return DONE
    show_catalog(console, catalog)
    return DONE


def _run_handler(args: List[str]) -> int:
    from flowmaker.pipeline.runner import FlowExecutor

    ns = _parse("run", args)
    if ns is None:
        return USAGE
    config, catalog, console = _session(ns)
    flow = catalog.load(ns.name)
    if flow.is_empty():
        logger.error("run: flow '%s' not found in %s", ns.name, catalog.path)
        return FAILED
    flow.display(console)
    return FlowExecutor(flow, console, base_dir=files_dir(config)).run()


def _predefined_handler(args: List[str]) -> int:
    from flowmaker.pipeline.flows import predefined_flows
    from flowmaker.pipeline.runner import FlowExecutor

    ns = _parse("predefined", args)
    if ns is None:
        return USAGE
    config, _, console = _session(ns)
    flows = predefined_flows()
    if ns.number is None:
        for number, flow in flows.items():
            console.write(f"{number}. {flow.name}")
            flow.display(console)
        return DONE
    if ns.number not in flows:
        logger.error("predefined: unknown flow %d (choose 1-%d)", ns.number, len(flows))
        return USAGE
    flow = flows[ns.number]
    console.write(f"Using predefined flow: {flow.name}")
    return FlowExecutor(flow, console, base_dir=files_dir(config)).run()


def _delete_handler(args: List[str]) -> int:
    ns = _parse("delete", args)
    if ns is None:
        return USAGE
    _, catalog, console = _session(ns)
    if ns.name not in catalog.names():
        logger.error("delete: flow '%s' not found in %s", ns.name, catalog.path)
        return FAILED
    if not catalog.delete(ns.name):
        return FAILED
    console.write(f"Flow '{ns.name}' deleted successfully!")
    return DONE


def get_options() -> Dict[str, Dict[str, object]]:
    """Return registry of CLI options, filling it on first use."""
    if _OPTIONS:
        return _OPTIONS
    _OPTIONS.update(
        {
            "help": {
                "about": "Shows the available options, or the arguments of one",
                "arguments": [("option", {"nargs": "?", "help": "option to describe"})],
                "config": False,
                "handler": _help_handler,
            },
            "menu": {
                "about": "Starts the interactive menu: create, run, save and delete flows",
                "handler": _menu_handler,
            },
            "list": {
                "about": "Lists the flows saved in the catalog",
                "handler": _list_handler,
            },
            "run": {
                "about": "Runs a saved flow by name",
                "arguments": [("name", {"metavar": "NAME", "help": "flow name in the catalog"})],
                "examples": [("Run the flow called budget", f"{SCRIPT} run budget")],
                "handler": _run_handler,
            },
            "predefined": {
                "about": "Lists the sample flows, or runs one by number",
                "arguments": [
                    ("number", {"metavar": "N", "nargs": "?", "type": int, "help": "sample flow to run"})
                ],
                "examples": [
                    ("List the sample flows", f"{SCRIPT} predefined"),
                    ("Run sample flow 3", f"{SCRIPT} predefined 3"),
                ],
                "handler": _predefined_handler,
            },
            "delete": {
                "about": "Deletes every catalog line for a flow name",
                "arguments": [("name", {"metavar": "NAME", "help": "flow name in the catalog"})],
                "handler": _delete_handler,
            },
        }
    )
    return _OPTIONS
