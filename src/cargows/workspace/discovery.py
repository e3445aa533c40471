"""Member discovery.

Finds every ``Cargo.toml`` under the workspace root, asks cargo which
workspace each belongs to and turns the distinct roots into member paths.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from cargows.foundation.errors import CargowsError
from cargows.workspace.metadata import MetadataResolver

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"


@dataclass(frozen=True, slots=True)
class SkippedManifest:
    """A candidate manifest that could not be resolved."""

    manifest: Path
    reason: str


@dataclass(slots=True)
class DiscoveryResult:
    """Distinct workspace roots found during a scan."""

    roots: set[Path] = field(default_factory=set)
    """Canonical workspace roots, deduplicated."""

    skipped: list[SkippedManifest] = field(default_factory=list)
    """Candidates dropped because resolution failed."""


def find_manifests(root: Path) -> Iterator[Path]:
    """Yield every manifest at any depth under ``root``, including its own."""
    for manifest in sorted(root.rglob(MANIFEST_NAME)):
        if manifest.is_file():
            yield manifest


def resolve_workspace_roots(
    manifests: Iterable[Path],
    resolver: MetadataResolver,
) -> DiscoveryResult:
    """Resolve each manifest to its workspace root.

    A manifest that cargo cannot resolve is skipped; one broken package
    must not block initialization of the rest.
    """
    result = DiscoveryResult()
    for manifest in manifests:
        try:
            root = resolver.resolve(manifest)
        except CargowsError as e:
            logger.debug("Skipping %s: %s", manifest, e.message)
            result.skipped.append(SkippedManifest(manifest=manifest, reason=e.message))
            continue
        result.roots.add(root.resolve())
    return result


def compute_members(
    roots: Iterable[Path],
    workspace_root: Path,
    *,
    is_root_package: bool,
) -> list[str]:
    """Turn resolved workspace roots into sorted member paths.

    Args:
        roots: Resolved workspace roots (duplicates allowed).
        workspace_root: Canonical root of the workspace being initialized.
        is_root_package: Whether the root manifest declares ``[package]``.
            Only then is the root itself (the empty path) kept as a member.

    Returns:
        Root-relative POSIX paths, sorted, without duplicates. Roots outside
        ``workspace_root`` are dropped.
    """
    members: set[str] = set()
    for root in roots:
        try:
            relative = root.relative_to(workspace_root)
        except ValueError:
            logger.debug("Dropping %s: outside %s", root, workspace_root)
            continue
        members.add("" if relative == Path() else relative.as_posix())

    if not is_root_package:
        members.discard("")

    return sorted(members)
