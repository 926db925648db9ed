"""Data structures produced by mapping source discovery."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ClassRecord:
    """A class discovered while scanning mapping sources.

    Attributes:
        name: Fully qualified class identifier (``module.QualName``).
        source_file: Canonical path of the file declaring the class.
        cls: The class object itself.
    """

    name: str
    source_file: str
    cls: type = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate class record data after initialization."""
        if not self.name:
            msg = "Class name cannot be empty"
            raise ValueError(msg)
        if not self.source_file:
            msg = "Source file cannot be empty"
            raise ValueError(msg)
