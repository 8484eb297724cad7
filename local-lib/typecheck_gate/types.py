"""Shared type aliases for the Stop type-check gate."""

from typing import Literal, TypeAlias

Decision: TypeAlias = Literal["approve", "block"]
LogLevel: TypeAlias = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
