"""
Error taxonomy for the integrations tool.

Library code raises these; only the CLI turns them into an operator
message and a process exit code.
"""

from __future__ import annotations


class IntegrationError(Exception):
    """Base class for every error reported to the operator."""

    exit_code: int = 1


class UsageError(IntegrationError):
    """Unknown command or provider, or a missing command-line argument."""

    exit_code = 2


class ValidationError(IntegrationError):
    """A builder flag or a record field failed validation."""

    exit_code = 2


class ConflictError(IntegrationError):
    """An add targeted a name that already exists."""

    exit_code = 3


class PersistenceError(IntegrationError):
    """The backing file could not be read, parsed or written."""

    exit_code = 4


class StaleWriteError(PersistenceError):
    """The backing file changed between load and save."""
