"""Loading of mapping source files into the running interpreter.

Classes only become visible to the mapping driver once the file that
declares them has been executed. Files are loaded through importlib and
registered in ``sys.modules``, so a file that was already loaded is reused
instead of being executed twice.

Every include root gets its own package, named after a digest of the
root's canonical path, and the files below it are loaded as submodules of
that package. Mapping files therefore never shadow regular modules, and
two roots holding files of the same name stay apart.
"""

import hashlib
import importlib.util
import logging
import os
import sys
from importlib.machinery import SourceFileLoader
from pathlib import PurePath
from types import ModuleType

from persistkit.exceptions import ClassLoadError

logger = logging.getLogger(__name__)

# Module attribute recording the canonical file a module was loaded from
SOURCE_ATTR = "__persistkit_source__"

NAMESPACE_PREFIX = "persistkit_mapped_"


def _canonical(path: str) -> str:
    return PurePath(os.path.realpath(path)).as_posix()


def root_namespace(root: str) -> str:
    """Return the package name used for files loaded from below a root.

    The same directory always maps to the same name, across processes too.
    """
    digest = hashlib.sha1(_canonical(root).encode(), usedforsecurity=False).hexdigest()
    return f"{NAMESPACE_PREFIX}{digest[:12]}"


def short_name(identifier: str) -> str:
    """Strip the root package from a class identifier.

    ``persistkit_mapped_<digest>.billing.Invoice`` becomes
    ``billing.Invoice``. Other identifiers are returned unchanged.
    """
    head, sep, rest = identifier.partition(".")
    if sep and head.startswith(NAMESPACE_PREFIX):
        return rest
    return identifier


class _ReadOnlySourceLoader(SourceFileLoader):
    """Source loader that never writes bytecode caches next to sources."""

    def set_data(self, path: str, data: bytes, *, _mode: int = 0o666) -> None:
        return None


class SourceLoader:
    """Loads mapping source files as modules, at most once each.

    A module previously loaded by persistkit from the same file is reused.
    One loaded from a different file under the same name is replaced. A
    module imported normally from the same file is adopted; any other
    module of the same name is never touched.
    """

    def load_namespace(self, root: str) -> str:
        """Register the package holding the modules loaded from below a root.

        Args:
            root: Include root directory.

        Returns:
            The package name, see root_namespace().

        Raises:
            ClassLoadError: If the name is taken by a module persistkit
                did not create for this root.
        """
        canonical = _canonical(root)
        name = root_namespace(root)
        existing = sys.modules.get(name)
        if existing is not None:
            if getattr(existing, SOURCE_ATTR, None) == canonical:
                return name
            raise ClassLoadError(canonical, f"module name {name!r} is already in use")

        package = ModuleType(name, f"Mapping sources loaded from {canonical}")
        package.__path__ = [canonical]
        setattr(package, SOURCE_ATTR, canonical)
        sys.modules[name] = package
        logger.debug("Registered mapping namespace %s for %s", name, canonical)
        return name

    def load(self, source_file: str, module_name: str) -> ModuleType:
        """Load a source file under the given module name.

        Args:
            source_file: Canonical path of the file to execute.
            module_name: Dotted name to register the module under.

        Returns:
            The loaded (or previously loaded) module.

        Raises:
            ClassLoadError: If the name is taken by a foreign module or the
                file raises while executing.
        """
        existing = sys.modules.get(module_name)
        if existing is not None:
            origin = getattr(existing, SOURCE_ATTR, None)
            if origin == source_file:
                logger.debug("Reusing loaded mapping module %s (%s)", module_name, source_file)
                return existing
            if origin is None and _module_file(existing) == source_file:
                # imported from inside another mapping file
                setattr(existing, SOURCE_ATTR, source_file)
                return existing
            if origin is None:
                taken_by = getattr(existing, "__file__", None) or "a built-in module"
                raise ClassLoadError(
                    source_file,
                    f"module name {module_name!r} is already used by {taken_by}",
                )
            logger.warning(
                "Replacing mapping module %s loaded from %s with %s",
                module_name,
                origin,
                source_file,
            )

        loader = _ReadOnlySourceLoader(module_name, source_file)
        spec = importlib.util.spec_from_file_location(module_name, source_file, loader=loader)
        if spec is None:
            raise ClassLoadError(source_file, "no module spec could be created")

        module = importlib.util.module_from_spec(spec)
        setattr(module, SOURCE_ATTR, source_file)
        sys.modules[module_name] = module
        try:
            loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise ClassLoadError(source_file, f"{type(e).__name__}: {e}") from e

        logger.debug("Loaded mapping module %s from %s", module_name, source_file)
        return module

    @staticmethod
    def declared_classes(module: ModuleType) -> list[type]:
        """Return classes declared by a module, in declaration order.

        Classes imported into the module from elsewhere are left out, and a
        class bound to several names is listed once.
        """
        classes: dict[type, None] = {}
        for obj in vars(module).values():
            if isinstance(obj, type) and obj.__module__ == module.__name__:
                classes.setdefault(obj, None)
        return list(classes)


def _module_file(module: ModuleType) -> str | None:
    path = getattr(module, "__file__", None)
    return _canonical(path) if path else None
