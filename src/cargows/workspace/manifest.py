"""Root manifest merging.

Loads the root ``Cargo.toml`` as a tomlkit document, fills in
``workspace.members`` and ``workspace.resolver`` and writes it back.
Everything outside those two keys is serialized exactly as it was read.
"""

import logging
import os
import tempfile
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

import tomlkit
from tomlkit.container import OutOfOrderTableProxy
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import Array, Table
from tomlkit.toml_document import TOMLDocument

from cargows.foundation.errors import ErrorCode, format_error, io_error

logger = logging.getLogger(__name__)


class Resolver(str, Enum):
    """Workspace feature resolver version."""

    V1 = "1"
    V2 = "2"
    V3 = "3"


DEFAULT_RESOLVER = Resolver.V3


def load_manifest(path: Path) -> TOMLDocument:
    """Parse the manifest at ``path``, or return an empty document if absent.

    Raises:
        CargowsError: FILE_READ_FAILED or MANIFEST_PARSE_ERROR.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No manifest at %s, starting from an empty document", path)
        return tomlkit.document()
    except OSError as e:
        raise io_error(ErrorCode.FILE_READ_FAILED, path, e) from e

    # Bytes, not text mode: CRLF line endings must survive the round trip
    try:
        return tomlkit.parse(raw.decode("utf-8"))
    except (TOMLKitError, UnicodeDecodeError) as e:
        raise format_error(ErrorCode.MANIFEST_PARSE_ERROR, path, str(e), e) from e


def is_root_package(document: TOMLDocument) -> bool:
    """Whether the root manifest is itself a package."""
    return "package" in document


def workspace_table(document: TOMLDocument, path: Path) -> Table | OutOfOrderTableProxy:
    """Get the ``[workspace]`` table, creating it if missing.

    Raises:
        CargowsError: WORKSPACE_NOT_TABLE if ``workspace`` is any other kind of
            value, inline tables included.
    """
    if "workspace" not in document:
        document.add("workspace", tomlkit.table())

    workspace = document["workspace"]
    if not isinstance(workspace, (Table, OutOfOrderTableProxy)):
        raise format_error(
            ErrorCode.WORKSPACE_NOT_TABLE,
            path,
            f"found {type(workspace).__name__}",
        )
    return workspace


def members_array(workspace: Table | OutOfOrderTableProxy, path: Path) -> Array:
    """Get ``workspace.members``, creating an empty array if missing.

    Raises:
        CargowsError: MEMBERS_NOT_ARRAY if ``members`` is not an array.
    """
    if "members" not in workspace:
        workspace["members"] = tomlkit.array()

    members = workspace["members"]
    if not isinstance(members, Array):
        raise format_error(
            ErrorCode.MEMBERS_NOT_ARRAY,
            path,
            f"found {type(members).__name__}",
        )
    return members


def merge_workspace(
    workspace: Table | OutOfOrderTableProxy,
    members: Array,
    member_paths: Iterable[str],
    resolver: Resolver | None = None,
) -> bool:
    """Merge member paths and the resolver into the workspace table.

    Does nothing when ``members`` already has entries.

    Returns:
        True if the table was changed, False if it was already initialized.
    """
    if len(members) > 0:
        return False

    # One entry per line, four-space indent, trailing comma on every entry
    members.extend(member_paths)
    members.multiline(True)

    if "resolver" not in workspace:
        workspace["resolver"] = (resolver or DEFAULT_RESOLVER).value

    return True


def write_manifest(path: Path, document: TOMLDocument) -> None:
    """Serialize ``document`` and atomically replace the file at ``path``.

    Raises:
        CargowsError: FILE_WRITE_FAILED.
    """
    content = tomlkit.dumps(document)

    try:
        mode = path.stat().st_mode & 0o777
    except OSError:
        mode = 0o644

    try:
        # Write to temp file in same directory, then rename (atomic on POSIX)
        fd, tmp_path = tempfile.mkstemp(
            suffix=".tmp",
            prefix=path.stem + "_",
            dir=path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, path)
        except OSError:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
    except OSError as e:
        raise io_error(ErrorCode.FILE_WRITE_FAILED, path, e) from e

    logger.debug("Wrote %s (%d bytes)", path, len(content))
