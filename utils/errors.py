"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Exceptions raised by the GPX parser and the brevet calculator.
"""

from __future__ import annotations


class BrevetEngineError(ValueError):
    """Base class for errors surfaced to the host application."""


class ParseError(BrevetEngineError):
    """The GPX document could not be parsed as XML."""


class InsufficientDataError(BrevetEngineError):
    """Fewer than two valid track points remain after filtering."""


class InvalidInputError(BrevetEngineError):
    """A distance, interval or control list is unusable."""
