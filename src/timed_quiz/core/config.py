"""Read ``quiz.toml`` and lay it over the built-in defaults."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping

__all__ = ["TomlConfigError", "load_layered"]

Sections = Mapping[str, Mapping[str, Any]]


class TomlConfigError(RuntimeError):
    """Raised when a config file is missing, unreadable or has stray keys."""


def load_layered(path: Path, defaults: Sections) -> dict[str, dict[str, Any]]:
    """Return a copy of ``defaults`` with the tables in ``path`` applied.

    Every section and key in the file must already exist in ``defaults``;
    ``defaults`` itself is left untouched. Values are not type-checked here.
    """

    document = _read(path)
    merged = {name: dict(values) for name, values in defaults.items()}
    for section, values in document.items():
        if section not in merged:
            raise TomlConfigError(
                f"{path.name}: unknown section [{section}]; expected one of "
                f"{', '.join(f'[{name}]' for name in merged)}."
            )
        if not isinstance(values, Mapping):
            raise TomlConfigError(
                f"{path.name}: '{section}' must be a [{section}] table, "
                f"found {type(values).__name__}."
            )
        for key, value in values.items():
            if key not in merged[section]:
                raise TomlConfigError(
                    f"{path.name}: unknown key '{section}.{key}'."
                )
            merged[section][key] = value
    return merged


def _read(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except IsADirectoryError as exc:
        raise TomlConfigError(f"Config path is a directory: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"{path.name} is not valid TOML: {exc}") from exc
