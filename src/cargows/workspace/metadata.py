"""Workspace root resolution through ``cargo metadata``.

Cargo is the authority on which workspace a manifest belongs to: a package
nested under a workspace reports the enclosing workspace's root, a standalone
package reports its own directory.
"""

import json
import logging
import subprocess
from pathlib import Path
from typing import Protocol

from cargows.foundation.errors import metadata_error

logger = logging.getLogger(__name__)


class MetadataResolver(Protocol):
    """Maps a manifest path to the canonical root of its workspace."""

    def resolve(self, manifest_path: Path) -> Path:
        """Return the workspace root for ``manifest_path``.

        Raises:
            CargowsError: METADATA_RESOLUTION_FAILED when the manifest
                cannot be resolved.
        """
        ...


class CargoMetadataResolver:
    """Resolves workspace roots by running ``cargo metadata``."""

    def __init__(
        self,
        cargo: str = "cargo",
        timeout: float = 60.0,
        offline: bool = False,
    ) -> None:
        self.cargo = cargo
        self.timeout = timeout
        self.offline = offline

    def command(self, manifest_path: Path) -> list[str]:
        cmd = [
            self.cargo,
            "metadata",
            "--format-version",
            "1",
            "--no-deps",
            "--manifest-path",
            str(manifest_path),
        ]
        if self.offline:
            cmd.append("--offline")
        return cmd

    def resolve(self, manifest_path: Path) -> Path:
        try:
            result = subprocess.run(
                self.command(manifest_path),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as e:
            raise metadata_error(manifest_path, f"'{self.cargo}' not found", e) from e
        except subprocess.TimeoutExpired as e:
            raise metadata_error(
                manifest_path, f"timed out after {self.timeout}s", e
            ) from e
        except subprocess.CalledProcessError as e:
            raise metadata_error(manifest_path, _first_line(e.stderr), e) from e

        try:
            workspace_root = json.loads(result.stdout)["workspace_root"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise metadata_error(
                manifest_path, "unexpected cargo metadata output", e
            ) from e

        logger.debug("%s -> workspace root %s", manifest_path, workspace_root)
        return Path(workspace_root)


def _first_line(stderr: str | None) -> str:
    """First non-empty line of cargo's stderr, e.g. ``error: failed to parse``."""
    for line in (stderr or "").splitlines():
        if line.strip():
            return line.strip()
    return "cargo metadata failed"
