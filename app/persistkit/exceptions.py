"""Exception hierarchy for persistkit.

All errors raised by the mapping layer derive from MappingError, which in
turn derives from PersistenceError. Registry lookups that cannot be
resolved raise UnknownAliasError.
"""


class PersistenceError(Exception):
    """Base exception for all persistkit errors."""


class MappingError(PersistenceError):
    """Raised when mapping information cannot be read or resolved."""


class NoPathsConfiguredError(MappingError):
    """Raised when a scan is requested without any include paths."""

    def __init__(self) -> None:
        super().__init__(
            "Specifying the paths to your entities is required "
            "in the annotation driver to retrieve all class names."
        )


class ConfigurationError(MappingError):
    """Raised when a configured include path is not an existing directory.

    Attributes:
        path: The offending path as it was configured.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"File mapping drivers must have a valid directory path, "
            f"however the given path {path!r} seems to be incorrect!"
        )


class ClassNotFoundError(MappingError):
    """Raised when a class identifier cannot be resolved to a class.

    Attributes:
        class_name: The identifier that failed to resolve.
    """

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(f"Class {class_name!r} does not exist")


class ClassLoadError(MappingError):
    """Raised when a mapping source file cannot be loaded.

    Attributes:
        path: Canonical path of the file that failed to load.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot load mapping source {path}: {reason}")


class UnknownAliasError(PersistenceError):
    """Raised when a namespace alias is not known to any object manager.

    Attributes:
        alias: The alias that could not be resolved.
    """

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"Unknown namespace alias {alias!r}")
