"""Typed write layer errors."""

from __future__ import annotations


class TypedWriteError(RuntimeError):
    """Base error for typed write layer."""


class AdapterNotFoundError(TypedWriteError):
    """No write adapter is registered for the model."""

    def __init__(self, model_name: str) -> None:
        super().__init__(f"No typed write adapter registered for model: {model_name}")


class InvalidPatchFieldError(TypedWriteError):
    """A patch payload names fields outside the adapter's allowlist."""

    def __init__(self, model_name: str, fields: list[str]) -> None:
        self.fields = sorted(fields)
        super().__init__(f"Invalid patch fields for {model_name}: {', '.join(self.fields)}")
