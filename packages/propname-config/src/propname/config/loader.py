import importlib
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

STALE_CHAIN_POLICIES = ("warn", "discard", "raise")
STALE_CHAIN_ENV = "PROPNAME_STALE_CHAIN"


@dataclass
class PropertyNameConfig:
    getter_prefixes: List[str] = field(default_factory=lambda: ["get"])
    boolean_prefixes: List[str] = field(default_factory=lambda: ["is"])
    terminal_types: List[str] = field(default_factory=list)
    stale_chain: str = "warn"
    cache_names: bool = True


def _find_pyproject_toml(search_path: Path) -> Path:
    current_dir = search_path.resolve()
    while current_dir.parent != current_dir:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        current_dir = current_dir.parent
    raise FileNotFoundError("Could not find pyproject.toml in any parent directory.")


def _string_list(data: Mapping[str, Any], key: str, default: List[str]) -> List[str]:
    value = data.get(key, default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"tool.propname.{key} must be a list of strings, got {value!r}")
    return list(value)


def _prefix_list(data: Mapping[str, Any], key: str, default: List[str]) -> List[str]:
    prefixes = _string_list(data, key, default)
    if not prefixes or not all(prefixes):
        raise ValueError(f"tool.propname.{key} must name at least one non-empty prefix")
    return prefixes


def _stale_chain(value: Any, source: str) -> str:
    if value not in STALE_CHAIN_POLICIES:
        allowed = ", ".join(STALE_CHAIN_POLICIES)
        raise ValueError(f"{source} must be one of {allowed}, got {value!r}")
    return value


def build_config(
    data: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None
) -> PropertyNameConfig:
    """Builds a config from a `[tool.propname]` table plus environment overrides."""
    defaults = PropertyNameConfig()
    environ = os.environ if environ is None else environ

    cache_names = data.get("cache_names", defaults.cache_names)
    if not isinstance(cache_names, bool):
        raise ValueError(f"tool.propname.cache_names must be a boolean, got {cache_names!r}")

    stale_chain = _stale_chain(
        data.get("stale_chain", defaults.stale_chain), "tool.propname.stale_chain"
    )
    if STALE_CHAIN_ENV in environ:
        stale_chain = _stale_chain(environ[STALE_CHAIN_ENV].strip().lower(), STALE_CHAIN_ENV)

    return PropertyNameConfig(
        getter_prefixes=_prefix_list(data, "getter_prefixes", defaults.getter_prefixes),
        boolean_prefixes=_prefix_list(data, "boolean_prefixes", defaults.boolean_prefixes),
        terminal_types=_string_list(data, "terminal_types", defaults.terminal_types),
        stale_chain=stale_chain,
        cache_names=cache_names,
    )


def load_config_from_path(search_path: Path) -> PropertyNameConfig:
    try:
        config_path = _find_pyproject_toml(search_path)
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        propname_data: Dict[str, Any] = data.get("tool", {}).get("propname", {})
    except FileNotFoundError:
        # No project file: defaults plus environment overrides
        propname_data = {}

    return build_config(propname_data)


def load_terminal_types(names: List[str]) -> List[type]:
    """Imports the dotted type names listed under `terminal_types`."""
    types: List[type] = []
    for dotted in names:
        module_name, _, attr = dotted.rpartition(".")
        if not module_name:
            raise ValueError(f"Terminal type '{dotted}' must be a dotted path")
        try:
            value = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Cannot import terminal type '{dotted}': {e}") from e
        if not isinstance(value, type):
            raise ValueError(f"Terminal type '{dotted}' is not a class")
        types.append(value)
    return types
