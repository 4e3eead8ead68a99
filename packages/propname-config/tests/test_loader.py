import datetime
from pathlib import Path

import pytest

from propname.config import (
    PropertyNameConfig,
    build_config,
    load_config_from_path,
    load_terminal_types,
)
from propname.test_utils import ProjectFactory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("PROPNAME_STALE_CHAIN", raising=False)


def test_load_config_reads_tool_table(tmp_path: Path):
    root = (
        ProjectFactory(tmp_path)
        .with_project_name("billing")
        .with_config(
            {
                "getter_prefixes": ["get", "fetch"],
                "boolean_prefixes": ["is", "has"],
                "terminal_types": ["datetime.datetime"],
                "stale_chain": "raise",
                "cache_names": False,
            }
        )
        .build()
    )

    config = load_config_from_path(root)

    assert config.getter_prefixes == ["get", "fetch"]
    assert config.boolean_prefixes == ["is", "has"]
    assert config.terminal_types == ["datetime.datetime"]
    assert config.stale_chain == "raise"
    assert config.cache_names is False


def test_load_config_searches_parent_directories(tmp_path: Path):
    ProjectFactory(tmp_path).with_config({"stale_chain": "discard"}).with_source(
        "src/app/models.py", "class Contract: ...\n"
    ).build()

    config = load_config_from_path(tmp_path / "src" / "app")
    assert config.stale_chain == "discard"


def test_missing_table_gives_defaults(tmp_path: Path):
    ProjectFactory(tmp_path).with_project_name("plain").build()

    assert load_config_from_path(tmp_path) == PropertyNameConfig()


def test_missing_file_gives_defaults(tmp_path: Path):
    config = load_config_from_path(tmp_path)

    assert config.getter_prefixes == ["get"]
    assert config.boolean_prefixes == ["is"]
    assert config.stale_chain == "warn"
    assert config.cache_names is True


def test_environment_overrides_file(tmp_path: Path, monkeypatch):
    ProjectFactory(tmp_path).with_config({"stale_chain": "warn"}).build()
    monkeypatch.setenv("PROPNAME_STALE_CHAIN", "RAISE")

    assert load_config_from_path(tmp_path).stale_chain == "raise"


def test_invalid_environment_value(monkeypatch):
    monkeypatch.setenv("PROPNAME_STALE_CHAIN", "ignore")

    with pytest.raises(ValueError, match="PROPNAME_STALE_CHAIN"):
        build_config({})


@pytest.mark.parametrize(
    "data, key",
    [
        ({"stale_chain": "explode"}, "stale_chain"),
        ({"cache_names": "yes"}, "cache_names"),
        ({"getter_prefixes": "get"}, "getter_prefixes"),
        ({"getter_prefixes": []}, "getter_prefixes"),
        ({"boolean_prefixes": [""]}, "boolean_prefixes"),
        ({"terminal_types": [1]}, "terminal_types"),
    ],
)
def test_invalid_values_name_the_key(data, key):
    with pytest.raises(ValueError, match=key):
        build_config(data, environ={})


def test_load_terminal_types():
    assert load_terminal_types(["datetime.datetime", "pathlib.Path"]) == [
        datetime.datetime,
        Path,
    ]


@pytest.mark.parametrize(
    "name, message",
    [
        ("datetime", "dotted path"),
        ("no_such_module_xyz.Thing", "Cannot import"),
        ("datetime.nope", "Cannot import"),
        ("datetime.MINYEAR", "not a class"),
    ],
)
def test_load_terminal_types_errors(name, message):
    with pytest.raises(ValueError, match=message):
        load_terminal_types([name])
