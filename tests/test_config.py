import pytest

from flowmaker.config.config import DEFAULTS, catalog_path, files_dir, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "none.yml")
    assert config == DEFAULTS
    config["catalog"]["path"] = "changed"
    assert DEFAULTS["catalog"]["path"] == "flows.csv"


def test_partial_file_is_merged(tmp_path):
    path = tmp_path / "flowmaker.yml"
    path.write_text("catalog:\n  path: data/catalog.csv\n", encoding="utf-8")
    config = load_config(path)
    assert str(catalog_path(config)) == "data/catalog.csv"
    assert str(files_dir(config)) == "."
    assert config["logging"]["level"] == "INFO"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == DEFAULTS


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_shipped_config_loads():
    config = load_config()
    assert config["catalog"]["path"] == "flows.csv"
