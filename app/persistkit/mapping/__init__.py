"""Mapping metadata discovery.

This module exports the annotation driver, the annotations and reader it
consumes, and the reflection service used by metadata layers.
"""

from persistkit.mapping.annotations import (
    Annotation,
    AttributeReader,
    Embeddable,
    Entity,
    MappedSuperclass,
    Reader,
    Table,
)
from persistkit.mapping.driver import AnnotationDriver, MappingDriver, SimpleAnnotationDriver
from persistkit.mapping.loader import root_namespace, short_name
from persistkit.mapping.metadata import ClassMetadata
from persistkit.mapping.models import ClassRecord
from persistkit.mapping.paths import PathSet
from persistkit.mapping.reflection import (
    PropertyHandle,
    ReflectionService,
    RuntimeReflectionService,
    resolve_class,
)
from persistkit.mapping.scanner import ClassDiscoveryScanner

__all__ = [
    "Annotation",
    "AnnotationDriver",
    "AttributeReader",
    "ClassDiscoveryScanner",
    "ClassMetadata",
    "ClassRecord",
    "Embeddable",
    "Entity",
    "MappedSuperclass",
    "MappingDriver",
    "PathSet",
    "PropertyHandle",
    "Reader",
    "ReflectionService",
    "RuntimeReflectionService",
    "SimpleAnnotationDriver",
    "Table",
    "resolve_class",
    "root_namespace",
    "short_name",
]
