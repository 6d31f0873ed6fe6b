# provisioning/errors.py
"""Errors raised by the provisioning collaborators."""
from __future__ import annotations

from typing import Optional


class ProvisioningError(Exception):
    """Base exception for all provisioning wizard errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ResourceFetchError(ProvisioningError):
    """Selectable resources could not be listed."""


class SubmissionError(ProvisioningError):
    """The provisioning request was rejected or could not be delivered."""


class IncompleteRequestError(ProvisioningError):
    """The aggregate is missing fields required for submission."""

    def __init__(self, missing: list) -> None:
        self.missing = list(missing)
        super().__init__(
            f"Request is missing required fields: {', '.join(self.missing)}",
            "Go back and complete the highlighted steps.",
        )


class SessionError(ProvisioningError):
    """Invalid login or project switch."""


class ConfigError(ProvisioningError):
    """Configuration file could not be used."""
