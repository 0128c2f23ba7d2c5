"""Bianco domain exceptions."""

from __future__ import annotations


class BiancoError(Exception):
    """Base for bianco domain errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class BiancoConfigurationError(BiancoError):
    """Config validation or load failure."""


class OptionsValidatorError(BiancoError, TypeError):
    """Options (or an options schema) failed validation."""


class ObservableTargetError(BiancoError):
    """Target object does not accept the emitter members."""
