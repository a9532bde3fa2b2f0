from datetime import datetime
from pathlib import Path

import pytest

from flowmaker.catalog.catalog import Catalog
from flowmaker.options.options import SCRIPT, get_options
from flowmaker.pipeline.flows import Flow
from flowmaker.pipeline.status import DONE, FAILED, USAGE
from flowmaker.steps.steps import EndStep, TitleStep


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "flowmaker.yml"
    path.write_text(
        "catalog:\n"
        f"  path: {tmp_path / 'flows.csv'}\n"
        "files:\n"
        f"  base_dir: {tmp_path}\n"
        "logging:\n"
        f"  file: {tmp_path / 'logs' / 'flowmaker.log'}\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def saved(tmp_path):
    catalog = Catalog(tmp_path / "flows.csv")
    now = datetime(2024, 3, 4, 5, 6, 7)
    catalog.save(Flow("A", [TitleStep(), EndStep()]), now=now)
    catalog.save(Flow("B", [EndStep()]), now=now)
    return catalog


def handler(name):
    return get_options()[name]["handler"]


def test_help_lists_every_option(capsys):
    assert handler("help")([]) == DONE
    out = capsys.readouterr().out
    listed = [line.split()[0] for line in out.splitlines() if line.startswith("  ")]
    assert listed == ["help", "menu", "list", "run", "predefined", "delete"]
    assert f"Run '{SCRIPT} help <option>'" in out


def test_help_for_one_option_comes_from_its_parser(capsys):
    assert handler("help")(["predefined"]) == DONE
    out = capsys.readouterr().out
    assert "usage:" in out
    assert f"{SCRIPT} predefined" in out
    assert "--config PATH" in out
    assert "sample flow to run" in out
    assert f"  {SCRIPT} predefined 3" in out


def test_script_named_in_help_exists():
    root = Path(__file__).resolve().parents[1]
    assert (root / SCRIPT.split()[-1]).is_file()


def test_help_for_unknown_option(capsys):
    assert handler("help")(["nope"]) == USAGE
    assert "Unknown option for help: nope" in capsys.readouterr().out


def test_list_shows_catalog(config_file, saved, capsys):
    assert handler("list")(["--config", str(config_file)]) == DONE
    out = capsys.readouterr().out
    assert "Flow Name: A" in out
    assert "Timestamp: 2024-03-04 05:06:07" in out
    assert "- TitleStep" in out


def test_list_empty_catalog(config_file, capsys):
    assert handler("list")(["--config", str(config_file)]) == DONE
    assert "No flows saved yet." in capsys.readouterr().out


def test_delete_removes_flow(config_file, saved, capsys):
    assert handler("delete")(["A", "--config", str(config_file)]) == DONE
    assert saved.names() == ["B"]
    assert "Flow 'A' deleted successfully!" in capsys.readouterr().out


def test_delete_unknown_flow(config_file, saved):
    assert handler("delete")(["Z", "--config", str(config_file)]) == FAILED
    assert saved.names() == ["A", "B"]


def test_bad_arguments_are_usage_errors(config_file):
    assert handler("delete")(["--config", str(config_file)]) == USAGE
    assert handler("list")(["--bogus"]) == USAGE


def test_run_unknown_flow(config_file, saved):
    assert handler("run")(["missing", "--config", str(config_file)]) == FAILED


def test_run_saved_flow(config_file, saved, monkeypatch, capsys):
    answers = iter(["y"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    assert handler("run")(["A", "--config", str(config_file)]) == DONE
    out = capsys.readouterr().out
    assert "1. TitleStep: Step with a title and subtitle." in out
    assert "Flow Completed!" in out


def test_predefined_listing_and_range(config_file, capsys):
    assert handler("predefined")(["--config", str(config_file)]) == DONE
    assert "4. Predefined Flow 4" in capsys.readouterr().out
    assert handler("predefined")(["9", "--config", str(config_file)]) == USAGE
