# errors.py

from __future__ import annotations

from typing import Any


class PaletteError(Exception):
    """Base class for everything the palette engine raises on purpose."""


class ConversionError(PaletteError, ValueError):
    """A color string could not be parsed (wrong length, non-hex digits)."""


class InputValidationError(PaletteError, ValueError):
    """Request arguments rejected before any external call is made."""

    def __init__(self, details: list[dict[str, str]]):
        self.details = list(details)
        first = self.details[0]["message"] if self.details else "Invalid Values"
        super().__init__(first)

    @classmethod
    def single(cls, field: str, message: str) -> "InputValidationError":
        return cls([{"field": field, "message": message}])


class ExternalServiceError(PaletteError):
    """The generative provider failed, timed out or answered with garbage."""

    retryable = True

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status_code: int | None = None,
        body: str | None = None,
        retryable: bool | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.body = body
        if retryable is not None:
            self.retryable = retryable

    def context(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "status_code": self.status_code,
            "body": self.body,
        }


class MalformedResponseError(ExternalServiceError):
    """Provider answered, but the payload does not match the palette schema."""


class ProviderConfigError(ExternalServiceError):
    """Provider cannot be constructed (missing key, unknown provider)."""

    retryable = False


__all__ = [
    "PaletteError",
    "ConversionError",
    "InputValidationError",
    "ExternalServiceError",
    "MalformedResponseError",
    "ProviderConfigError",
]
