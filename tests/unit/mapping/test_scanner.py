"""Tests for ClassDiscoveryScanner class discovery."""

import os
import sys
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from persistkit.exceptions import ConfigurationError, NoPathsConfiguredError
from persistkit.mapping.loader import SourceLoader, root_namespace, short_name
from persistkit.mapping.scanner import ClassDiscoveryScanner

WriteSource = Callable[[Path, str], Path]


def _names(records: list) -> list[str]:
    return [short_name(record.name) for record in records]


class TestScanPreconditions:
    """Tests for include path validation."""

    def test_no_include_paths(self) -> None:
        """An empty include list raises NoPathsConfiguredError."""
        with pytest.raises(NoPathsConfiguredError):
            ClassDiscoveryScanner().scan([], [], ".py")

    def test_missing_include_path(self, tmp_path: Path) -> None:
        """A non-existent include path raises ConfigurationError naming it."""
        missing = str(tmp_path / "does-not-exist")

        with pytest.raises(ConfigurationError, match="does-not-exist") as exc_info:
            ClassDiscoveryScanner().scan([missing], [], ".py")

        assert exc_info.value.path == missing

    def test_file_as_include_path(self, tmp_path: Path) -> None:
        """An include path pointing at a file is rejected."""
        file_path = tmp_path / "models.py"
        file_path.write_text("")

        with pytest.raises(ConfigurationError):
            ClassDiscoveryScanner().scan([str(file_path)], [], ".py")

    def test_validation_happens_before_loading(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """No file is loaded when any include path is invalid."""
        good = tmp_path / "good"
        write_source(good / "Thing.py", "class Thing:\n    pass\n")
        loader = MagicMock(spec=SourceLoader)

        with pytest.raises(ConfigurationError):
            ClassDiscoveryScanner(loader).scan([str(good), str(tmp_path / "bad")], [], ".py")

        loader.load.assert_not_called()


class TestScanDiscovery:
    """Tests for file matching and class collection."""

    def test_finds_classes_in_all_files(self, models_dir: Path) -> None:
        """Every class of every matching file is reported."""
        records = ClassDiscoveryScanner().scan([str(models_dir)], [], ".py")

        assert _names(records) == ["Helper.Helper", "User.User"]

    def test_record_carries_source_file(self, models_dir: Path) -> None:
        """Records point to the canonical file that declares the class."""
        records = ClassDiscoveryScanner().scan([str(models_dir)], [], ".py")

        user = next(r for r in records if short_name(r.name) == "User.User")
        assert user.source_file == Path(os.path.realpath(models_dir / "User.py")).as_posix()
        assert user.cls.__name__ == "User"

    def test_extension_match_is_case_insensitive(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """Files are matched by suffix regardless of case."""
        write_source(tmp_path / "Upper.SRC", "class Upper:\n    pass\n")
        write_source(tmp_path / "lower.src", "class Lower:\n    pass\n")
        write_source(tmp_path / "other.txt", "class Other:\n    pass\n")

        records = ClassDiscoveryScanner().scan([str(tmp_path)], [], ".src")

        assert _names(records) == ["Upper.Upper", "lower.Lower"]

    def test_bare_extension_file_is_ignored(self, tmp_path: Path) -> None:
        """A file named exactly like the extension is not a candidate."""
        (tmp_path / ".py").write_text("raise RuntimeError('should not load')\n")

        assert ClassDiscoveryScanner().scan([str(tmp_path)], [], ".py") == []

    def test_recurses_into_subdirectories(self, tmp_path: Path, write_source: WriteSource) -> None:
        """Nested files get dotted module names relative to the root."""
        write_source(tmp_path / "billing" / "invoice.py", "class Invoice:\n    pass\n")
        write_source(tmp_path / "billing" / "__init__.py", "class Billing:\n    pass\n")
        write_source(tmp_path / "account.py", "class Account:\n    pass\n")

        records = ClassDiscoveryScanner().scan([str(tmp_path)], [], ".py")

        assert _names(records) == ["account.Account", "billing.Billing", "billing.invoice.Invoice"]

    def test_modules_live_in_root_namespace(self, models_dir: Path) -> None:
        """Files are loaded as submodules of a package named after their root."""
        namespace = root_namespace(str(models_dir))

        records = ClassDiscoveryScanner().scan([str(models_dir)], [], ".py")

        assert [r.name for r in records] == [f"{namespace}.Helper.Helper", f"{namespace}.User.User"]
        assert records[1].cls.__module__ == f"{namespace}.User"
        assert sys.modules[namespace].__path__ == [Path(os.path.realpath(models_dir)).as_posix()]

    def test_file_named_like_stdlib_module(self, tmp_path: Path, write_source: WriteSource) -> None:
        """A file called like an imported module neither fails nor shadows it."""
        import queue

        write_source(tmp_path / "queue.py", "class Queue:\n    pass\n")

        records = ClassDiscoveryScanner().scan([str(tmp_path)], [], ".py")

        assert _names(records) == ["queue.Queue"]
        assert sys.modules["queue"] is queue
        assert records[0].cls is not queue.Queue

    def test_aliased_class_is_reported_once(self, tmp_path: Path, write_source: WriteSource) -> None:
        """A class bound to several names in its module yields one record."""
        write_source(tmp_path / "user.py", "class User:\n    pass\n\n\nLegacyUser = User\n")

        records = ClassDiscoveryScanner().scan([str(tmp_path)], [], ".py")

        assert _names(records) == ["user.User"]

    def test_same_file_name_in_two_roots(self, tmp_path: Path, write_source: WriteSource) -> None:
        """Equally named files in two roots keep distinct names and source files."""
        first = write_source(tmp_path / "a" / "user.py", "class User:\n    pass\n")
        second = write_source(tmp_path / "b" / "user.py", "class User:\n    pass\n")

        records = ClassDiscoveryScanner().scan(
            [str(tmp_path / "a"), str(tmp_path / "b")], [], ".py"
        )

        assert [r.name for r in records] == [
            f"{root_namespace(str(tmp_path / 'a'))}.user.User",
            f"{root_namespace(str(tmp_path / 'b'))}.user.User",
        ]
        assert [r.source_file for r in records] == [
            Path(os.path.realpath(first)).as_posix(),
            Path(os.path.realpath(second)).as_posix(),
        ]
        assert records[0].cls is not records[1].cls

    def test_files_without_classes_are_loaded(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """Files declaring no class are still loaded."""
        write_source(tmp_path / "constants.py", "LIMIT = 10\n")
        loader = MagicMock(wraps=SourceLoader())

        records = ClassDiscoveryScanner(loader).scan([str(tmp_path)], [], ".py")

        assert records == []
        loader.load.assert_called_once()

    def test_imported_classes_are_attributed_to_their_file(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """A class re-exported by another file is reported once, for its own file."""
        write_source(tmp_path / "a_base.py", "class Base:\n    pass\n")
        write_source(
            tmp_path / "b_child.py",
            """\
            from .a_base import Base


            class Child(Base):
                pass
            """,
        )

        records = ClassDiscoveryScanner().scan([str(tmp_path)], [], ".py")

        assert _names(records) == ["a_base.Base", "b_child.Child"]

    def test_symlinked_directories_are_not_followed(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """Directories reached through a symlink are not descended into."""
        outside = tmp_path / "outside"
        write_source(outside / "Linked.py", "class Linked:\n    pass\n")
        root = tmp_path / "root"
        write_source(root / "Local.py", "class Local:\n    pass\n")
        (root / "link").symlink_to(outside, target_is_directory=True)

        records = ClassDiscoveryScanner().scan([str(root)], [], ".py")

        assert _names(records) == ["Local.Local"]

    def test_overlapping_roots_load_each_file_once(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """A file reachable from two include roots is only loaded once."""
        write_source(tmp_path / "core" / "Order.py", "class Order:\n    pass\n")
        loader = MagicMock(wraps=SourceLoader())

        records = ClassDiscoveryScanner(loader).scan(
            [str(tmp_path), str(tmp_path / "core")], [], ".py"
        )

        assert _names(records) == ["core.Order.Order"]
        loader.load.assert_called_once()

    def test_repeated_scans_are_identical(self, models_dir: Path) -> None:
        """Scanning an unchanged tree twice gives the same ordered result."""
        scanner = ClassDiscoveryScanner()

        first = _names(scanner.scan([str(models_dir)], [], ".py"))
        second = _names(scanner.scan([str(models_dir)], [], ".py"))

        assert first == second


class TestScanExclusion:
    """Tests for exclude path handling."""

    def test_excluded_directory_is_skipped(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """Files below an exclude root are neither loaded nor reported."""
        write_source(tmp_path / "Kept.py", "class Kept:\n    pass\n")
        write_source(tmp_path / "internal" / "Hidden.py", "raise RuntimeError('excluded')\n")

        records = ClassDiscoveryScanner().scan(
            [str(tmp_path)], [str(tmp_path / "internal")], ".py"
        )

        assert _names(records) == ["Kept.Kept"]

    def test_exclusion_matches_whole_path_components(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """An exclude root does not swallow sibling directories sharing its prefix."""
        write_source(tmp_path / "internal" / "Hidden.py", "class Hidden:\n    pass\n")
        write_source(tmp_path / "internal2" / "Shown.py", "class Shown:\n    pass\n")

        records = ClassDiscoveryScanner().scan(
            [str(tmp_path)], [str(tmp_path / "internal")], ".py"
        )

        assert _names(records) == ["internal2.Shown.Shown"]

    def test_exclusion_uses_canonical_paths(
        self, tmp_path: Path, write_source: WriteSource
    ) -> None:
        """Exclude roots given with relative segments still match."""
        write_source(tmp_path / "legacy" / "Old.py", "class Old:\n    pass\n")
        write_source(tmp_path / "New.py", "class New:\n    pass\n")
        exclude = str(tmp_path / "legacy" / ".." / "legacy")

        records = ClassDiscoveryScanner().scan([str(tmp_path)], [exclude], ".py")

        assert _names(records) == ["New.New"]
