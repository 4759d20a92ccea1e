"""Timed, text-based quiz runner."""
