"""Exception types for Assembly Definition Editor."""

from pathlib import Path


class AssemblyDefinitionError(Exception):
    """Base error for assembly definition handling."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        if self.path:
            return f"{message} ({self.path})"
        return message


class LoadError(AssemblyDefinitionError):
    """A record could not be read or parsed. Aborts loading that record."""


class UnknownPlatformError(LoadError):
    """A persisted platform name is not in the platform catalog."""


class EntryValidationError(AssemblyDefinitionError):
    """A single list entry violates the naming rules and was skipped."""


class CommitError(AssemblyDefinitionError):
    """Writing or re-importing one record failed."""


class InvalidStateError(ValueError):
    """A Mixed value was used where a concrete value is required."""


class UnresolvedReferenceWarning(UserWarning):
    """A reference target could not be located; the reference is kept as missing."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path
