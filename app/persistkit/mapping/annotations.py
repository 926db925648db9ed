"""Class-level mapping annotations and the reader that retrieves them.

Annotations are plain immutable objects attached to a class declaration by
using an instance as a class decorator::

    @Entity()
    @Table(name="users")
    class User:
        ...

Only annotations written on the class itself are visible; annotations of
base classes are not inherited.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

# Attribute name under which annotations are stored in the class __dict__
ANNOTATIONS_ATTR = "__mapping_annotations__"

_T = TypeVar("_T", bound=type)


@dataclass(frozen=True, slots=True)
class Annotation:
    """Base class for all class-level mapping annotations.

    Instances act as class decorators that record themselves on the
    decorated class, keeping the order in which they appear in source.
    """

    def __call__(self, cls: _T) -> _T:
        if not isinstance(cls, type):
            msg = f"{type(self).__name__} can only annotate classes, got {cls!r}"
            raise TypeError(msg)
        existing: tuple[Annotation, ...] = cls.__dict__.get(ANNOTATIONS_ATTR, ())
        # Decorators apply bottom-up, prepend to keep source order
        setattr(cls, ANNOTATIONS_ATTR, (self, *existing))
        return cls


@dataclass(frozen=True, slots=True)
class Entity(Annotation):
    """Marks a class as a mapped entity.

    Attributes:
        repository_class: Optional dotted path of a custom repository class.
        read_only: Whether instances are never updated after insertion.
    """

    repository_class: str | None = None
    read_only: bool = False


@dataclass(frozen=True, slots=True)
class MappedSuperclass(Annotation):
    """Marks a class whose mapping is inherited by entity subclasses."""

    repository_class: str | None = None


@dataclass(frozen=True, slots=True)
class Embeddable(Annotation):
    """Marks a value object embedded into entities."""


@dataclass(frozen=True, slots=True)
class Table(Annotation):
    """Names the storage table of an entity."""

    name: str
    schema: str | None = None


class Reader(ABC):
    """Abstract source of class-level annotations.

    Readers are consulted by annotation drivers to decide whether a
    class is mapped and to load its metadata.
    """

    @abstractmethod
    def get_class_annotations(self, cls: type) -> Sequence[object]:
        """Return the annotations declared on a class.

        Args:
            cls: Class to inspect.

        Returns:
            Annotation instances in declaration order.
        """

    def get_class_annotation(self, cls: type, annotation_type: type) -> object | None:
        """Return the first annotation of the given type, if any."""
        for annotation in self.get_class_annotations(cls):
            if isinstance(annotation, annotation_type):
                return annotation
        return None


class AttributeReader(Reader):
    """Reads annotations recorded by Annotation decorators."""

    def get_class_annotations(self, cls: type) -> Sequence[object]:
        return list(cls.__dict__.get(ANNOTATIONS_ATTR, ()))
