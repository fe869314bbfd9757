"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntFlag, StrEnum


class LoginState(StrEnum):
    NONE = "none"
    IN_PROGRESS = "in_progress"
    ACTIVE = "active"


class UpdateFlags(IntFlag):
    """Options passed along with a subscription update."""

    NONE = 0
    RESET_TITLE = 1
