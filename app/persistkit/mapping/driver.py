"""Mapping drivers that read metadata from annotated classes.

The AnnotationDriver scans configured directories for source files, loads
them, and keeps the classes carrying one of its marker annotations.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, Self

from persistkit.exceptions import MappingError, NoPathsConfiguredError
from persistkit.mapping.annotations import (
    AttributeReader,
    Entity,
    MappedSuperclass,
    Reader,
    Table,
)
from persistkit.mapping.paths import PathSet, StrPath
from persistkit.mapping.reflection import ReflectionService, RuntimeReflectionService, resolve_class
from persistkit.mapping.scanner import ClassDiscoveryScanner

if TYPE_CHECKING:
    from persistkit.core.config import MappingConfig
    from persistkit.mapping.metadata import ClassMetadata

logger = logging.getLogger(__name__)

DEFAULT_FILE_EXTENSION = ".py"


class MappingDriver(ABC):
    """Contract for drivers that provide class mapping metadata."""

    @abstractmethod
    def load_metadata_for_class(self, class_name: str, metadata: ClassMetadata) -> None:
        """Load the mapping metadata of a class into the given metadata."""

    @abstractmethod
    def get_all_class_names(self) -> list[str]:
        """Return the identifiers of all classes mapped by this driver."""

    @abstractmethod
    def is_transient(self, class_name: str) -> bool:
        """Check whether a class is transient (not mapped) for this driver."""


class AnnotationDriver(MappingDriver):
    """Reads mapping metadata from class-level annotations.

    Subclasses declare which annotation types mark a class as mapped in
    ``entity_annotation_classes`` and implement metadata loading.

    The list of mapped classes is computed on the first call to
    get_all_class_names() and cached for the lifetime of the driver.
    Adding paths or changing the file extension afterwards does not
    invalidate it; call clear_cache() to force a rescan.

    Args:
        reader: Annotation reader used to inspect classes.
        paths: One or several directories where mapped classes live.

    Example:
        >>> driver = SimpleAnnotationDriver(AttributeReader(), "app/models")
        >>> driver.get_all_class_names()
        ['persistkit_mapped_3f2a9c0b1d4e.user.User']
    """

    entity_annotation_classes: ClassVar[dict[type, bool]] = {}

    def __init__(
        self,
        reader: Reader,
        paths: StrPath | Sequence[StrPath] | None = None,
        *,
        scanner: ClassDiscoveryScanner | None = None,
    ) -> None:
        self._reader = reader
        self._path_set = PathSet()
        self._file_extension = DEFAULT_FILE_EXTENSION
        self._scanner = scanner or ClassDiscoveryScanner()
        self._class_names: list[str] | None = None
        self._lock = threading.Lock()

        if paths is None or paths == "" or (isinstance(paths, Sequence) and len(paths) == 0):
            return

        self.add_paths(paths)

    @classmethod
    def from_config(cls, config: MappingConfig, reader: Reader | None = None) -> Self:
        """Build a driver from a loaded mapping configuration.

        Args:
            config: Validated mapping configuration.
            reader: Annotation reader. Defaults to AttributeReader.

        Returns:
            A configured driver of the class this is called on.
        """
        driver = cls(reader or AttributeReader(), config.paths)
        driver.add_exclude_paths(config.exclude_paths)
        driver.file_extension = config.file_extension
        return driver

    @property
    def reader(self) -> Reader:
        """Return the annotation reader."""
        return self._reader

    @property
    def paths(self) -> list[str]:
        """Return the configured lookup paths."""
        return self._path_set.include_paths

    def add_paths(self, paths: StrPath | Sequence[StrPath]) -> None:
        """Append lookup paths to the driver."""
        self._path_set.add_include_paths(paths)

    @property
    def exclude_paths(self) -> list[str]:
        """Return the configured exclude paths."""
        return self._path_set.exclude_paths

    def add_exclude_paths(self, paths: StrPath | Sequence[StrPath]) -> None:
        """Append paths whose files are skipped while scanning."""
        self._path_set.add_exclude_paths(paths)

    @property
    def file_extension(self) -> str:
        """Return the file extension of mapping sources."""
        return self._file_extension

    @file_extension.setter
    def file_extension(self, file_extension: str) -> None:
        self._file_extension = file_extension

    def is_transient(self, class_name: str) -> bool:
        """Check whether a class lacks every marker annotation.

        Only non-transient classes, that is entities and mapped
        superclasses, should have their metadata loaded.

        Raises:
            ClassNotFoundError: If the class cannot be resolved.
        """
        return self._is_transient_class(resolve_class(class_name))

    def _is_transient_class(self, cls: type) -> bool:
        for annotation in self._reader.get_class_annotations(cls):
            if type(annotation) in self.entity_annotation_classes:
                return False
        return True

    def get_all_class_names(self) -> list[str]:
        """Return identifiers of all mapped classes under the lookup paths.

        Raises:
            NoPathsConfiguredError: If no lookup paths are configured.
            ConfigurationError: If a lookup path is not a directory.
            ClassLoadError: If a source file cannot be loaded.
        """
        if self._class_names is not None:
            return list(self._class_names)

        with self._lock:
            if self._class_names is None:
                self._class_names = self._scan_class_names()
            return list(self._class_names)

    def clear_cache(self) -> None:
        """Forget the cached class names so the next call rescans."""
        with self._lock:
            self._class_names = None

    def _scan_class_names(self) -> list[str]:
        if not self.paths:
            raise NoPathsConfiguredError()

        records = self._scanner.scan(self.paths, self.exclude_paths, self._file_extension)
        class_names = [record.name for record in records if not self._is_transient_class(record.cls)]
        logger.info(
            "%s found %d mapped class(es) out of %d",
            type(self).__name__,
            len(class_names),
            len(records),
        )
        return class_names


class SimpleAnnotationDriver(AnnotationDriver):
    """Annotation driver for the built-in Entity and MappedSuperclass markers."""

    entity_annotation_classes: ClassVar[dict[type, bool]] = {
        Entity: True,
        MappedSuperclass: True,
    }

    def __init__(
        self,
        reader: Reader,
        paths: StrPath | Sequence[StrPath] | None = None,
        *,
        scanner: ClassDiscoveryScanner | None = None,
        reflection: ReflectionService | None = None,
    ) -> None:
        super().__init__(reader, paths, scanner=scanner)
        self._reflection = reflection or RuntimeReflectionService()

    def load_metadata_for_class(self, class_name: str, metadata: ClassMetadata) -> None:
        """Populate metadata from the class annotations.

        Raises:
            MappingError: If the class is neither an entity nor a mapped
                superclass.
        """
        cls = resolve_class(class_name)
        annotations = list(self._reader.get_class_annotations(cls))

        entity = next((a for a in annotations if isinstance(a, Entity)), None)
        superclass = next((a for a in annotations if isinstance(a, MappedSuperclass)), None)
        if entity is None and superclass is None:
            msg = f"Class {class_name!r} is not a valid entity or mapped super class."
            raise MappingError(msg)

        metadata.annotations = annotations
        metadata.parent_classes = self._reflection.get_parent_classes(class_name)
        metadata.is_mapped_superclass = entity is None
        marker = entity or superclass
        metadata.repository_class = marker.repository_class if marker else None

        table = next((a for a in annotations if isinstance(a, Table)), None)
        if table is not None:
            metadata.table_name = table.name
