"""
Crudforge Errors - Exception types raised by the generators

Every failure the CLI reports to the operator derives from CrudforgeError.
File-exists conflicts are not errors; they surface as warnings instead.
"""

from __future__ import annotations


class CrudforgeError(Exception):
    """Base class for generator failures."""


class DescriptorError(CrudforgeError):
    """Invalid model/field input, reported with the offending value."""

    def __init__(self, message: str, value: object | None = None):
        super().__init__(message)
        self.value = value


class SchemaUpdateError(CrudforgeError):
    """The Prisma schema file could not be read or updated."""


class CommandError(CrudforgeError):
    """A delegated child process exited non-zero."""

    def __init__(self, command: list[str], returncode: int, output: str = ""):
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(f"Command failed ({returncode}): {' '.join(command)}")
