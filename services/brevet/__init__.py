"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from services.brevet_service import BrevetService as BrevetService


def __getattr__(name: str) -> object:
    if name == "BrevetService":
        from services.brevet_service import BrevetService

        return BrevetService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["BrevetService"]
