"""Cargo workspace bootstrapping.

- bootstrap: create the root directory, git init, .gitignore
- discovery: find manifests and resolve them to member paths
- metadata: ``cargo metadata`` adapter
- manifest: format-preserving merge into the root Cargo.toml
- initializer: the end-to-end pipeline
"""

from cargows.workspace.bootstrap import (
    BootstrapResult,
    GitVersionControl,
    VersionControl,
    ensure_repository,
)
from cargows.workspace.discovery import (
    DiscoveryResult,
    SkippedManifest,
    compute_members,
    find_manifests,
    resolve_workspace_roots,
)
from cargows.workspace.initializer import InitResult, initialize_workspace
from cargows.workspace.manifest import DEFAULT_RESOLVER, Resolver
from cargows.workspace.metadata import CargoMetadataResolver, MetadataResolver

__all__ = [
    # Bootstrap
    "BootstrapResult",
    "GitVersionControl",
    "VersionControl",
    "ensure_repository",
    # Discovery
    "DiscoveryResult",
    "SkippedManifest",
    "compute_members",
    "find_manifests",
    "resolve_workspace_roots",
    # Metadata
    "CargoMetadataResolver",
    "MetadataResolver",
    # Manifest
    "DEFAULT_RESOLVER",
    "Resolver",
    # Pipeline
    "InitResult",
    "initialize_workspace",
]
