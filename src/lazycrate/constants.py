"""Constants used throughout the lazycrate engine.

This module defines the package logger and the placeholder text shown for
unresolved dependencies.
"""

import logging

LOGGER_NAME: str = "lazycrate"
"""Default logger name for the lazycrate engine."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for lazycrate internal diagnostics."""

UNRESOLVED_REPR: str = "<unresolved>"
"""Text rendered for the placeholder handed out during the discovery pass."""
