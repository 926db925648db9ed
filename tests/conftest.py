"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from persistkit.mapping.loader import SOURCE_ATTR

ENTITY_SOURCE = """\
from persistkit.mapping import Entity


@Entity()
class {name}:
    pass
"""

PLAIN_SOURCE = """\
class {name}:
    pass
"""


@pytest.fixture(autouse=True)
def unload_mapping_modules() -> Iterator[None]:
    """Remove modules loaded from mapping sources after each test."""
    yield
    for name, module in list(sys.modules.items()):
        if getattr(module, SOURCE_ATTR, None) is not None:
            del sys.modules[name]


@pytest.fixture
def write_source() -> Callable[[Path, str], Path]:
    """Return a helper writing dedented source code to a file.

    Parent directories are created as needed.
    """

    def _write(path: Path, source: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        return path

    return _write


@pytest.fixture
def models_dir(tmp_path: Path, write_source: Callable[[Path, str], Path]) -> Path:
    """Directory with one entity (User) and one plain class (Helper)."""
    models = tmp_path / "models"
    write_source(models / "User.py", ENTITY_SOURCE.format(name="User"))
    write_source(models / "Helper.py", PLAIN_SOURCE.format(name="Helper"))
    return models
