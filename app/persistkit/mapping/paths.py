"""Include and exclude lookup paths for mapping drivers."""

import os
from collections.abc import Iterable

StrPath = str | os.PathLike[str]


class PathSet:
    """Ordered, de-duplicated include and exclude directory roots.

    Adding a path that is already present is a no-op; insertion order is
    preserved so that scans visit roots deterministically.
    """

    def __init__(self) -> None:
        # dict keys give ordered set semantics
        self._include: dict[str, None] = {}
        self._exclude: dict[str, None] = {}

    @property
    def include_paths(self) -> list[str]:
        """Return the configured include paths in insertion order."""
        return list(self._include)

    @property
    def exclude_paths(self) -> list[str]:
        """Return the configured exclude paths in insertion order."""
        return list(self._exclude)

    def add_include_paths(self, paths: StrPath | Iterable[StrPath]) -> None:
        """Union the given path or paths into the include paths."""
        for path in _iter_paths(paths):
            self._include.setdefault(os.fspath(path), None)

    def add_exclude_paths(self, paths: StrPath | Iterable[StrPath]) -> None:
        """Union the given path or paths into the exclude paths."""
        for path in _iter_paths(paths):
            self._exclude.setdefault(os.fspath(path), None)

    def __repr__(self) -> str:
        return f"PathSet(include={self.include_paths!r}, exclude={self.exclude_paths!r})"


def _iter_paths(paths: StrPath | Iterable[StrPath]) -> Iterable[StrPath]:
    # a single path is never iterated character by character
    if isinstance(paths, (str, os.PathLike)):
        return [paths]
    return paths
