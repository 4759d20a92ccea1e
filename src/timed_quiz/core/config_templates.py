"""Packaged configuration templates for timed-quiz commands."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path

__all__ = [
    "ConfigTemplate",
    "ConfigTemplateError",
    "get_template",
]


class ConfigTemplateError(RuntimeError):
    """Raised when a template is unknown or cannot be written."""


@dataclass(frozen=True)
class ConfigTemplate:
    """A commented TOML file shipped inside ``timed_quiz.templates``."""

    name: str
    filename: str
    package: str = "timed_quiz.templates"

    def read_text(self) -> str:
        try:
            resource = resources.files(self.package).joinpath(self.filename)
            return resource.read_text(encoding="utf-8")
        except FileNotFoundError as exc:  # pragma: no cover - package state
            raise ConfigTemplateError(
                f"Template '{self.name}' resource not found."
            ) from exc

    def write(
        self, path: Path, *, overwrite: bool = False, mode: int = 0o600
    ) -> Path:
        """Copy the template to ``path``, keeping an existing file by default."""

        if path.is_dir():
            raise ConfigTemplateError(f"Config path is a directory: {path}")
        if path.exists() and not overwrite:
            raise ConfigTemplateError(
                f"Config already exists: {path} (pass --force to replace it)"
            )
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.read_text(), encoding="utf-8")
        try:
            path.chmod(mode)
        except PermissionError:  # pragma: no cover - depends on filesystem
            pass
        return path


_TEMPLATES: dict[str, ConfigTemplate] = {
    "quiz": ConfigTemplate(name="quiz", filename="quiz.toml"),
}


def get_template(name: str) -> ConfigTemplate:
    try:
        return _TEMPLATES[name]
    except KeyError as exc:
        raise ConfigTemplateError(f"Unknown config template '{name}'.") from exc
