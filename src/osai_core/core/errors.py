# src/osai_core/core/errors.py

"""
Error hierarchy used across the app.

    OsaiError
    ├── ConfigError
    │   └── MissingCredentialError  (also a NotifierError)
    ├── ParseError                  (also a ValueError)
    ├── StoreError
    ├── NotifierError
    ├── RenderError
    └── PlaybackError

Background scheduling never lets these escape the poll loop; the console
reports them as plain text.
"""

from __future__ import annotations

from enum import StrEnum


class OsaiError(Exception):
    """Base class for all app errors."""


class ConfigError(OsaiError):
    """Required configuration (e.g. a credential) is missing or invalid."""


class ParseError(OsaiError, ValueError):
    """User task input could not be parsed."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class StoreError(OsaiError):
    """The task file could not be written."""


class NotifierErrorKind(StrEnum):
    MISSING_CREDENTIAL = "missing_credential"
    MALFORMED_RESPONSE = "malformed_response"
    EXHAUSTED = "exhausted"


class NotifierError(OsaiError):
    """The text-generation endpoint did not produce usable text."""

    def __init__(self, kind: NotifierErrorKind, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        # Last HTTP status or transport cause (for EXHAUSTED).
        self.detail = detail


class MissingCredentialError(NotifierError, ConfigError):
    def __init__(self, message: str) -> None:
        super().__init__(NotifierErrorKind.MISSING_CREDENTIAL, message)


class RenderError(OsaiError):
    """The handoff file could not be written."""


class PlaybackError(OsaiError):
    """The synthesis/playback collaborator reported a failure."""
