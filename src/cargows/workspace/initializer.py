"""Workspace initialization pipeline.

bootstrap (only when the root is missing) -> load root manifest ->
discover members -> merge -> write. Data flows strictly forward and the
manifest write is the last step.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tomlkit.container import OutOfOrderTableProxy
from tomlkit.items import Table

from cargows.foundation.config import CargowsConfig, get_config
from cargows.foundation.errors import CargowsError
from cargows.workspace.bootstrap import GitVersionControl, VersionControl, ensure_repository
from cargows.workspace.discovery import (
    MANIFEST_NAME,
    SkippedManifest,
    compute_members,
    find_manifests,
    resolve_workspace_roots,
)
from cargows.workspace.manifest import (
    Resolver,
    is_root_package,
    load_manifest,
    members_array,
    merge_workspace,
    workspace_table,
    write_manifest,
)
from cargows.workspace.metadata import CargoMetadataResolver, MetadataResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InitResult:
    """Outcome of a single ``initialize_workspace`` run."""

    root: Path
    """Canonical workspace root."""

    manifest_path: Path
    """Root Cargo.toml."""

    members: tuple[str, ...] = ()
    """Members written (empty when already initialized)."""

    resolver: str | None = None
    """Resolver value in the manifest after the run."""

    already_initialized: bool = False
    """True if members were already declared and nothing was written."""

    created: bool = False
    """True if the workspace directory was created by this run."""

    skipped: tuple[SkippedManifest, ...] = field(default_factory=tuple)
    """Manifests dropped because cargo could not resolve them."""

    warnings: tuple[CargowsError, ...] = field(default_factory=tuple)
    """Non-fatal bootstrap problems (git init, .gitignore)."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "manifest_path": str(self.manifest_path),
            "members": list(self.members),
            "resolver": self.resolver,
            "already_initialized": self.already_initialized,
            "created": self.created,
            "skipped": [
                {"manifest": str(s.manifest), "reason": s.reason} for s in self.skipped
            ],
            "warnings": [w.to_dict() for w in self.warnings],
        }


def initialize_workspace(
    path: str | Path,
    resolver: Resolver | None = None,
    *,
    metadata: MetadataResolver | None = None,
    vcs: VersionControl | None = None,
    config: CargowsConfig | None = None,
) -> InitResult:
    """Create or update the root manifest so it declares every package under ``path``.

    Re-running on a workspace whose ``members`` is already populated is a
    no-op.

    Args:
        path: Workspace root. Created (with git) if it does not exist.
        resolver: Resolver to write when the manifest has none. Defaults to
            ``config.default_resolver``.
        metadata: Workspace root resolver (default: ``cargo metadata``).
        vcs: Version control for new directories (default: git).
        config: Settings (default: ``get_config()``).

    Returns:
        InitResult describing what was done.

    Raises:
        CargowsError: on I/O and manifest format errors. Nothing is written
            to the manifest in that case.
    """
    config = config or get_config()
    if metadata is None:
        metadata = CargoMetadataResolver(
            cargo=config.cargo,
            timeout=config.metadata_timeout,
            offline=config.offline,
        )
    if vcs is None:
        vcs = GitVersionControl(git=config.git, timeout=config.vcs_timeout)
    if resolver is None:
        resolver = Resolver(config.default_resolver)

    root = Path(path).expanduser().resolve()
    bootstrap = ensure_repository(root, vcs, ignore_pattern=config.ignore_pattern)
    # Re-canonicalize now that the directory exists (symlinked parents)
    root = root.resolve()

    manifest_path = root / MANIFEST_NAME
    document = load_manifest(manifest_path)
    root_package = is_root_package(document)
    workspace = workspace_table(document, manifest_path)
    members = members_array(workspace, manifest_path)

    if len(members) > 0:
        logger.info("%s already initialized", root)
        return InitResult(
            root=root,
            manifest_path=manifest_path,
            resolver=_resolver_value(workspace),
            already_initialized=True,
            created=bootstrap.created,
            warnings=tuple(bootstrap.warnings),
        )

    discovery = resolve_workspace_roots(find_manifests(root), metadata)
    member_paths = compute_members(discovery.roots, root, is_root_package=root_package)
    logger.info("crates: %s", ", ".join(member_paths))

    merge_workspace(workspace, members, member_paths, resolver)
    write_manifest(manifest_path, document)
    logger.info("initialized %s", root)

    return InitResult(
        root=root,
        manifest_path=manifest_path,
        members=tuple(member_paths),
        resolver=_resolver_value(workspace),
        created=bootstrap.created,
        skipped=tuple(discovery.skipped),
        warnings=tuple(bootstrap.warnings),
    )


def _resolver_value(workspace: Table | OutOfOrderTableProxy) -> str | None:
    value = workspace.get("resolver")
    return None if value is None else str(value)
