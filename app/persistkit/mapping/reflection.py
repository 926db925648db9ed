"""Reflection service abstraction and its runtime implementation.

Metadata layers use a ReflectionService instead of inspecting classes
directly, so that static and runtime reflection can be swapped.
"""

import importlib
import inspect
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from persistkit.exceptions import ClassNotFoundError


def class_identifier(cls: type) -> str:
    """Return the fully qualified identifier of a class (``module.QualName``)."""
    return f"{cls.__module__}.{cls.__qualname__}"


def resolve_class(class_name: str | type) -> type:
    """Resolve a fully qualified class identifier to the class object.

    The longest module prefix already present in ``sys.modules`` is used
    first; otherwise prefixes are imported from longest to shortest. The
    remaining parts are looked up as attributes, which supports nested
    classes.

    Args:
        class_name: Identifier such as ``app.models.User``, or a class.

    Returns:
        The resolved class.

    Raises:
        ClassNotFoundError: If no class matches the identifier.
    """
    if isinstance(class_name, type):
        return class_name

    parts = class_name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        module = sys.modules.get(module_name)
        if module is None:
            try:
                module = importlib.import_module(module_name)
            except (ImportError, ValueError):
                continue

        obj: Any = module
        for attr in parts[split:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                break
        if isinstance(obj, type):
            return obj

    raise ClassNotFoundError(class_name)


@dataclass(frozen=True, slots=True)
class PropertyHandle:
    """Accessor for a named attribute of a class's instances.

    Writes go through ``object.__setattr__`` so that frozen dataclasses
    and classes overriding ``__setattr__`` can still be hydrated.

    Attributes:
        owner: Class that declares the property.
        name: Attribute name.
    """

    owner: type
    name: str

    def get_value(self, instance: object) -> Any:
        """Read the attribute from an instance."""
        return getattr(instance, self.name)

    def set_value(self, instance: object, value: Any) -> None:
        """Write the attribute on an instance."""
        object.__setattr__(instance, self.name, value)


class ReflectionService(ABC):
    """Very simple reflection service abstraction.

    Required inside metadata layers that may use either static or
    runtime reflection.
    """

    @abstractmethod
    def get_parent_classes(self, class_name: str) -> list[str]:
        """Return identifiers of the parent classes of a class.

        Raises:
            MappingError: If the class cannot be resolved.
        """

    @abstractmethod
    def get_class_short_name(self, class_name: str) -> str:
        """Return the short (unqualified) name of a class."""

    @abstractmethod
    def get_class_namespace(self, class_name: str) -> str:
        """Return the module a class is declared in."""

    @abstractmethod
    def get_class(self, class_name: str) -> type | None:
        """Return the class object, or None."""

    @abstractmethod
    def get_accessible_property(self, class_name: str, prop: str) -> PropertyHandle | None:
        """Return an accessor for a declared property, or None."""

    @abstractmethod
    def has_public_method(self, class_name: str, method: str) -> bool:
        """Check whether a class has a public method with the given name."""


class RuntimeReflectionService(ReflectionService):
    """ReflectionService backed by the live interpreter."""

    def get_parent_classes(self, class_name: str) -> list[str]:
        cls = resolve_class(class_name)
        return [class_identifier(parent) for parent in cls.__mro__[1:] if parent is not object]

    def get_class_short_name(self, class_name: str) -> str:
        return resolve_class(class_name).__name__

    def get_class_namespace(self, class_name: str) -> str:
        return resolve_class(class_name).__module__

    def get_class(self, class_name: str) -> type | None:
        return resolve_class(class_name)

    def get_accessible_property(self, class_name: str, prop: str) -> PropertyHandle | None:
        cls = resolve_class(class_name)
        for owner in cls.__mro__:
            if owner is object:
                continue
            declared = owner.__dict__
            if prop in inspect.get_annotations(owner):
                return PropertyHandle(owner=owner, name=prop)
            if prop in _slots_of(owner):
                return PropertyHandle(owner=owner, name=prop)
            if prop in declared and not callable(declared[prop]):
                return PropertyHandle(owner=owner, name=prop)
        return None

    def has_public_method(self, class_name: str, method: str) -> bool:
        if method.startswith("_") and not (method.startswith("__") and method.endswith("__")):
            return False
        cls = resolve_class(class_name)
        try:
            attr = inspect.getattr_static(cls, method)
        except AttributeError:
            return False
        if isinstance(attr, (staticmethod, classmethod)):
            return True
        return inspect.isfunction(attr) or inspect.ismethoddescriptor(attr)


def _slots_of(cls: type) -> tuple[str, ...]:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)
