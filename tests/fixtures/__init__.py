"""Shared helpers for the timed_quiz test suite."""

from .answers import GatedAnswers, scripted  # noqa: F401
from .workspace import write_csv  # noqa: F401

__all__ = [
    "GatedAnswers",
    "scripted",
    "write_csv",
]
