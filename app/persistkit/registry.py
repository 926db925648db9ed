"""Contracts for object managers, repositories and their registry.

Persistence engines implement these interfaces; higher layers depend on
them to look up the manager responsible for a class.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any


class ObjectRepository(ABC):
    """Contract for a repository of one mapped class."""

    @property
    @abstractmethod
    def class_name(self) -> str:
        """Return the identifier of the class this repository manages."""

    @abstractmethod
    def find(self, object_id: Any) -> object | None:
        """Find an object by its identifier."""

    @abstractmethod
    def find_all(self) -> Sequence[object]:
        """Return all objects of the repository's class."""

    @abstractmethod
    def find_by(self, criteria: Mapping[str, Any]) -> Sequence[object]:
        """Return objects whose attributes match all criteria."""

    def find_one_by(self, criteria: Mapping[str, Any]) -> object | None:
        """Return the first object matching the criteria, or None."""
        found = self.find_by(criteria)
        return found[0] if found else None


class ObjectManager(ABC):
    """Contract for the component that tracks and persists objects."""

    @abstractmethod
    def find(self, class_name: str, object_id: Any) -> object | None:
        """Find an object of a class by its identifier."""

    @abstractmethod
    def persist(self, obj: object) -> None:
        """Schedule an object for insertion."""

    @abstractmethod
    def remove(self, obj: object) -> None:
        """Schedule an object for removal."""

    @abstractmethod
    def clear(self) -> None:
        """Detach all managed objects."""

    @abstractmethod
    def flush(self) -> None:
        """Write all pending changes to the storage."""

    @abstractmethod
    def contains(self, obj: object) -> bool:
        """Check whether an object is managed."""

    @abstractmethod
    def get_repository(self, class_name: str) -> ObjectRepository:
        """Return the repository of a mapped class."""


class ManagerRegistry(ABC):
    """Contract covering the object managers of a persistence layer."""

    @abstractmethod
    def get_default_manager_name(self) -> str:
        """Return the default object manager name."""

    @abstractmethod
    def get_manager(self, name: str | None = None) -> ObjectManager:
        """Return a named object manager (the default one for None)."""

    @abstractmethod
    def get_managers(self) -> dict[str, ObjectManager]:
        """Return all registered object managers keyed by name."""

    @abstractmethod
    def reset_manager(self, name: str | None = None) -> ObjectManager:
        """Replace a named object manager with a fresh one.

        Useful when a manager was closed after a rolled back transaction.
        Any object still holding the previous manager keeps an obsolete
        reference; depend on the registry instead to avoid this.
        """

    @abstractmethod
    def get_alias_namespace(self, alias: str) -> str:
        """Resolve a namespace alias registered by any object manager.

        Raises:
            UnknownAliasError: If no manager knows the alias.
        """

    @abstractmethod
    def get_manager_names(self) -> dict[str, str]:
        """Return all object manager names mapped to their service ids."""

    @abstractmethod
    def get_repository(self, type_name: str, manager_name: str | None = None) -> ObjectRepository:
        """Return the repository of a persistent class."""

    @abstractmethod
    def get_manager_for_class(self, class_name: str) -> ObjectManager | None:
        """Return the object manager responsible for a class, if any."""
