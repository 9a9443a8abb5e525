from __future__ import annotations


class ReleaseError(RuntimeError):
    """Base class for release pipeline failures."""


class ConfigError(ReleaseError):
    """Raised when the release configuration cannot be loaded."""


class AuthError(ReleaseError):
    """Raised when no registry credential is available to the process."""


class GraphError(ReleaseError):
    """Raised when the declared unit set cannot be ordered."""


class DuplicateUnitError(GraphError):
    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(f"Unit declared more than once: {unit}")


class UnknownDependencyError(GraphError):
    def __init__(self, unit: str, dependency: str) -> None:
        self.unit = unit
        self.dependency = dependency
        super().__init__(f"Unit {unit} depends on unknown unit {dependency}")


class CycleError(GraphError):
    def __init__(self, unit: str) -> None:
        self.unit = unit
        super().__init__(f"Dependency cycle detected involving unit {unit}")


class RegistryError(ReleaseError):
    """Registry rejected a publish or the retry budget ran out."""

    def __init__(self, message: str, transient: bool = False) -> None:
        self.transient = transient
        super().__init__(message)


class AlreadyPublishedError(RegistryError):
    """Registry reports the exact version already exists."""


class BuildError(ReleaseError):
    """Raised by the external build step when a unit cannot be prepared."""
