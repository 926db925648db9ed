"""Arguments passed to persistence event listeners."""

import warnings
from dataclasses import dataclass
from typing import Any

from persistkit.registry import ObjectManager


class EventArgs:
    """Base class for classes containing event data."""


@dataclass(frozen=True, slots=True)
class LifecycleEventArgs(EventArgs):
    """Event data for lifecycle transitions of a managed object.

    Dispatched when an object is created, updated or removed.

    Attributes:
        object: The object the event concerns.
        object_manager: Manager handling the object.
    """

    object: Any
    object_manager: ObjectManager

    def get_object(self) -> Any:
        """Return the associated object."""
        return self.object

    def get_entity(self) -> Any:
        """Return the associated object.

        .. deprecated::
            Use :meth:`get_object` instead.
        """
        warnings.warn(
            "LifecycleEventArgs.get_entity() is deprecated, use get_object()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.object

    def get_object_manager(self) -> ObjectManager:
        """Return the associated object manager."""
        return self.object_manager


@dataclass(frozen=True, slots=True)
class ManagerEventArgs(EventArgs):
    """Event data for manager-wide events such as pre-flush.

    Attributes:
        object_manager: Manager raising the event.
    """

    object_manager: ObjectManager

    def get_object_manager(self) -> ObjectManager:
        """Return the associated object manager."""
        return self.object_manager
