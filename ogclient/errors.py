"""Error types raised by the client and the validation helpers that raise them."""

from __future__ import annotations


class OpenGeminiError(Exception):
    """Base class for every error raised by the client."""

    default_message = "opengemini client error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class EmptyAuthTokenError(OpenGeminiError, ValueError):
    default_message = "empty auth token"


class EmptyAuthUsernameError(OpenGeminiError, ValueError):
    default_message = "empty auth username"


class EmptyAuthPasswordError(OpenGeminiError, ValueError):
    default_message = "empty auth password"


class EmptyDatabaseNameError(OpenGeminiError, ValueError):
    default_message = "empty database name"


class EmptyMeasurementError(OpenGeminiError, ValueError):
    default_message = "empty measurement"


class EmptyCommandError(OpenGeminiError, ValueError):
    default_message = "empty command"


class EmptyTagOrFieldError(OpenGeminiError, ValueError):
    default_message = "empty tag or field"


class EmptyTagKeyError(OpenGeminiError, ValueError):
    default_message = "empty tag key"


class NoAddressError(OpenGeminiError, ValueError):
    default_message = "must have at least one address"


class EmptyRetentionPolicyError(OpenGeminiError, ValueError):
    default_message = "empty retention policy"


class UnsupportedFieldValueTypeError(OpenGeminiError, TypeError):
    default_message = "unsupported field value type"


class EmptyRecordError(OpenGeminiError, ValueError):
    default_message = "empty record"


def check_database_name(database: str) -> None:
    """Raise EmptyDatabaseNameError if the database name is empty."""
    if not database:
        raise EmptyDatabaseNameError()


def check_measurement_name(measurement: str) -> None:
    """Raise EmptyMeasurementError if the measurement name is empty."""
    if not measurement:
        raise EmptyMeasurementError()


def check_database_and_policy(database: str, retention_policy: str) -> None:
    """Raise if either the database or the retention policy is empty."""
    if not database:
        raise EmptyDatabaseNameError()
    if not retention_policy:
        raise EmptyRetentionPolicyError()


def check_command(command: str) -> None:
    """Raise EmptyCommandError if the command is empty."""
    if not command:
        raise EmptyCommandError()