"""Discovery of classes declared in mapping source files.

Walks the include roots recursively, loads every file matching the
configured extension that is not under an exclude root, and reports the
classes declared by the loaded files.
"""

import inspect
import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path, PurePath
from types import ModuleType

from persistkit.exceptions import ConfigurationError, NoPathsConfiguredError
from persistkit.mapping.loader import SourceLoader
from persistkit.mapping.models import ClassRecord
from persistkit.mapping.reflection import class_identifier

logger = logging.getLogger(__name__)


class ClassDiscoveryScanner:
    """Finds the classes declared in files under a set of directories.

    Directory entries are visited in name order, so repeated scans of an
    unchanged tree yield the same records in the same order.

    Args:
        loader: Loader used to execute source files. Defaults to a new
            SourceLoader.
    """

    def __init__(self, loader: SourceLoader | None = None) -> None:
        self._loader = loader or SourceLoader()

    def scan(
        self,
        include_paths: Sequence[str],
        exclude_paths: Sequence[str],
        extension: str,
    ) -> list[ClassRecord]:
        """Load all candidate files and return the classes they declare.

        Args:
            include_paths: Directory roots to walk.
            exclude_paths: Directory roots whose files are skipped.
            extension: File name suffix to match (case-insensitive).

        Returns:
            ClassRecords in file visit order, then declaration order.

        Raises:
            NoPathsConfiguredError: If include_paths is empty.
            ConfigurationError: If an include path is not a readable directory.
            ClassLoadError: If a candidate file cannot be loaded.
        """
        if not include_paths:
            raise NoPathsConfiguredError()

        for path in include_paths:
            if not os.path.isdir(path) or not os.access(path, os.R_OK | os.X_OK):
                raise ConfigurationError(path)

        excludes = [_as_posix(os.path.realpath(path)) for path in exclude_paths]

        # canonical source file -> loaded module, in visit order
        included: dict[str, ModuleType] = {}
        for root in include_paths:
            root_path = Path(root)
            namespace = self._loader.load_namespace(root)
            for candidate in self._iter_candidates(root_path, extension):
                source_file = _as_posix(os.path.realpath(candidate))

                if _is_excluded(source_file, excludes):
                    logger.debug("Skipping excluded mapping source: %s", source_file)
                    continue
                if source_file in included:
                    continue

                module_name = f"{namespace}.{_module_name(candidate, root_path, extension)}"
                included[source_file] = self._loader.load(source_file, module_name)

        records = self._collect(included)
        logger.info(
            "Scanned %d mapping source file(s), found %d class(es)",
            len(included),
            len(records),
        )
        return records

    def _iter_candidates(self, directory: Path, extension: str) -> Iterator[Path]:
        """Yield matching regular files below a directory, depth first.

        Symlinked directories are not descended into.
        """
        try:
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
        except PermissionError:
            logger.warning("Permission denied scanning directory: %s", directory)
            return

        for entry in entries:
            if entry.is_dir():
                if not entry.is_symlink():
                    yield from self._iter_candidates(entry, extension)
            elif entry.is_file() and _matches_extension(entry.name, extension):
                yield entry

    def _collect(self, included: dict[str, ModuleType]) -> list[ClassRecord]:
        """Build records for classes whose declaring file was included."""
        records: list[ClassRecord] = []
        for module in included.values():
            for cls in self._loader.declared_classes(module):
                declaring_file = _declaring_file(cls)
                if declaring_file is None or declaring_file not in included:
                    continue
                records.append(
                    ClassRecord(
                        name=class_identifier(cls),
                        source_file=declaring_file,
                        cls=cls,
                    )
                )
        return records


def _as_posix(path: str) -> str:
    return PurePath(path).as_posix()


def _matches_extension(name: str, extension: str) -> bool:
    return len(name) > len(extension) and name.lower().endswith(extension.lower())


def _is_excluded(source_file: str, excludes: list[str]) -> bool:
    for exclude in excludes:
        if source_file == exclude or source_file.startswith(exclude.rstrip("/") + "/"):
            return True
    return False


def _module_name(candidate: Path, root: Path, extension: str) -> str:
    """Derive a dotted module name from a file's path below its root.

    ``models/auth/user.py`` becomes ``models.auth.user``; a package
    ``__init__`` file is named after its directory. The result is relative
    to the root's namespace package.
    """
    relative = candidate.relative_to(root)
    parts = list(relative.parts)
    stem = parts[-1][: len(parts[-1]) - len(extension)] if extension else parts[-1]
    if stem == "__init__" and len(parts) > 1:
        parts.pop()
    else:
        parts[-1] = stem
    return ".".join(parts)


def _declaring_file(cls: type) -> str | None:
    try:
        return _as_posix(os.path.realpath(inspect.getfile(cls)))
    except TypeError:
        return None
