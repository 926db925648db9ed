"""Class metadata populated by mapping drivers."""

from dataclasses import dataclass, field


@dataclass(slots=True)
class ClassMetadata:
    """Mapping information collected for a single class.

    Attributes:
        name: Fully qualified class identifier.
        annotations: Class-level annotations in declaration order.
        parent_classes: Identifiers of the parent classes, nearest first.
        is_mapped_superclass: True if the class only provides inherited mapping.
        table_name: Storage table name, if one was declared.
        repository_class: Dotted path of a custom repository class, if any.
    """

    name: str
    annotations: list[object] = field(default_factory=list)
    parent_classes: list[str] = field(default_factory=list)
    is_mapped_superclass: bool = False
    table_name: str | None = None
    repository_class: str | None = None
