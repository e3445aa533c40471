"""End-to-end tests for initialize_workspace with fake cargo and git."""

from pathlib import Path

import pytest
import tomlkit

from cargows.foundation.config import CargowsConfig
from cargows.foundation.errors import CargowsError, ErrorCode
from cargows.workspace import Resolver, initialize_workspace


def _read(path: Path) -> dict:
    return tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()


class TestFreshWorkspace:
    """Scenarios starting from a tree without a root manifest."""

    def test_three_nested_packages(self, tmp_path: Path, crate, metadata, vcs, config) -> None:
        """a, b and c/sub become members, resolver defaults to the newest."""
        root = tmp_path / "ws"
        crate(root / "a")
        crate(root / "b")
        crate(root / "c" / "sub")

        result = initialize_workspace(root, metadata=metadata, vcs=vcs, config=config)

        assert result.members == ("a", "b", "c/sub")
        assert result.resolver == "3"
        assert not result.already_initialized
        assert _read(root / "Cargo.toml") == {
            "workspace": {"members": ["a", "b", "c/sub"], "resolver": "3"}
        }

    def test_missing_root_is_bootstrapped(
        self, tmp_path: Path, metadata, vcs, config
    ) -> None:
        """A missing root is created, git-initialized and gets a .gitignore."""
        root = tmp_path / "new" / "ws"

        result = initialize_workspace(root, metadata=metadata, vcs=vcs, config=config)

        assert result.created
        assert vcs.calls == [root.resolve()]
        assert (root / ".gitignore").read_text(encoding="utf-8") == "**/target\n"
        assert result.members == ()
        assert _read(root / "Cargo.toml")["workspace"]["resolver"] == "3"

    def test_vcs_failure_still_succeeds(
        self, tmp_path: Path, metadata, failing_vcs, config
    ) -> None:
        root = tmp_path / "ws"

        result = initialize_workspace(root, metadata=metadata, vcs=failing_vcs, config=config)

        assert (root / "Cargo.toml").exists()
        assert [w.code for w in result.warnings] == [ErrorCode.VCS_INIT_FAILED]

    def test_existing_root_not_bootstrapped(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        crate(tmp_path / "a")

        result = initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)

        assert not result.created
        assert vcs.calls == []
        assert not (tmp_path / ".gitignore").exists()

    def test_requested_resolver(self, tmp_path: Path, crate, metadata, vcs, config) -> None:
        crate(tmp_path / "a")

        result = initialize_workspace(
            tmp_path, Resolver.V2, metadata=metadata, vcs=vcs, config=config
        )

        assert result.resolver == "2"

    def test_config_default_resolver(self, tmp_path: Path, crate, metadata, vcs) -> None:
        crate(tmp_path / "a")

        result = initialize_workspace(
            tmp_path, metadata=metadata, vcs=vcs, config=CargowsConfig(default_resolver="1")
        )

        assert result.resolver == "1"


class TestMembership:
    """Which roots end up as members."""

    def test_nested_workspace_collapses(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        """Crates inside an existing workspace are represented by its root only."""
        engine = tmp_path / "engine"
        crate(engine)
        crate(engine / "core")
        crate(engine / "render")
        crate(tmp_path / "tools")
        for sub in ("core", "render"):
            metadata.roots[(engine / sub).resolve()] = engine.resolve()

        result = initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)

        assert result.members == ("engine", "tools")

    def test_pure_workspace_root_not_a_member(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        (tmp_path / "Cargo.toml").write_text("[workspace]\n", encoding="utf-8")
        crate(tmp_path / "a")

        result = initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)

        assert result.members == ("a",)
        assert "" not in _read(tmp_path / "Cargo.toml")["workspace"]["members"]

    def test_root_package_is_a_member(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        crate(tmp_path, name="root")
        crate(tmp_path / "a")

        result = initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)

        assert result.members == ("", "a")
        document = _read(tmp_path / "Cargo.toml")
        assert document["package"]["name"] == "root"
        assert document["workspace"]["members"] == ["", "a"]

    def test_unresolvable_manifest_skipped(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        crate(tmp_path / "a")
        crate(tmp_path / "broken")
        metadata.failures.add((tmp_path / "broken").resolve())

        result = initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)

        assert result.members == ("a",)
        assert [s.manifest for s in result.skipped] == [
            (tmp_path / "broken" / "Cargo.toml").resolve()
        ]
        assert result.to_dict()["skipped"][0]["manifest"].endswith("Cargo.toml")


class TestIdempotence:
    """Re-running never rewrites an initialized workspace."""

    def test_second_run_is_byte_identical(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        crate(tmp_path / "a")
        crate(tmp_path / "b")
        initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)
        first = (tmp_path / "Cargo.toml").read_bytes()

        crate(tmp_path / "c")
        result = initialize_workspace(
            tmp_path, Resolver.V1, metadata=metadata, vcs=vcs, config=config
        )

        assert result.already_initialized
        assert result.members == ()
        assert (tmp_path / "Cargo.toml").read_bytes() == first

    def test_populated_members_reported_without_scan(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        original = '[workspace]\nmembers = ["a"]\n'
        (tmp_path / "Cargo.toml").write_text(original, encoding="utf-8")
        crate(tmp_path / "a")

        result = initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)

        assert result.already_initialized
        assert result.resolver is None
        assert metadata.calls == []
        assert (tmp_path / "Cargo.toml").read_text(encoding="utf-8") == original


class TestFatalErrors:
    """I/O and format errors abort before anything is written."""

    def test_members_wrong_shape(self, tmp_path: Path, crate, metadata, vcs, config) -> None:
        original = '[workspace]\nmembers = "a"\n'
        (tmp_path / "Cargo.toml").write_text(original, encoding="utf-8")
        crate(tmp_path / "a")

        with pytest.raises(CargowsError) as exc_info:
            initialize_workspace(tmp_path, metadata=metadata, vcs=vcs, config=config)

        assert exc_info.value.code == ErrorCode.MEMBERS_NOT_ARRAY
        assert metadata.calls == []
        assert (tmp_path / "Cargo.toml").read_text(encoding="utf-8") == original

    def test_root_is_a_file(self, tmp_path: Path, metadata, vcs, config) -> None:
        target = tmp_path / "ws"
        target.write_text("", encoding="utf-8")

        with pytest.raises(CargowsError) as exc_info:
            initialize_workspace(target, metadata=metadata, vcs=vcs, config=config)

        assert exc_info.value.code == ErrorCode.DIRECTORY_CREATE_FAILED


class TestAliasedPaths:
    """A workspace path given through a symlink behaves like the real one."""

    def test_symlinked_workspace_root(
        self, tmp_path: Path, crate, metadata, vcs, config
    ) -> None:
        real = tmp_path / "real"
        crate(real / "a")
        crate(real / "c" / "sub")
        alias = tmp_path / "alias"
        alias.symlink_to(real, target_is_directory=True)

        result = initialize_workspace(alias, metadata=metadata, vcs=vcs, config=config)

        assert result.root == real.resolve()
        assert result.members == ("a", "c/sub")
        assert not result.created
        assert vcs.calls == []
        assert _read(real / "Cargo.toml")["workspace"]["members"] == ["a", "c/sub"]
