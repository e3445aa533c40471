"""First-run repository bootstrapping.

Creates the workspace directory, initializes git in it and drops a
``.gitignore`` for build output. Only directory creation can fail the run;
git and ignore-file problems are logged as warnings and collected on the
result.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from cargows.foundation.errors import CargowsError, ErrorCode, io_error

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_PATTERN = "**/target"


class VersionControl(Protocol):
    """Initializes version control in a directory."""

    def init(self, path: Path) -> bool:
        """Return True if the repository was initialized."""
        ...


class GitVersionControl:
    """Runs ``git init`` in the target directory."""

    def __init__(self, git: str = "git", timeout: float = 10.0) -> None:
        self.git = git
        self.timeout = timeout

    def init(self, path: Path) -> bool:
        try:
            result = subprocess.run(
                [self.git, "init"],
                cwd=path,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.debug("git init in %s failed: %s", path, e)
            return False

        if result.returncode != 0:
            logger.debug("git init in %s exited %d: %s", path, result.returncode, result.stderr)
            return False
        return True


@dataclass(slots=True)
class BootstrapResult:
    """What ``ensure_repository`` did."""

    created: bool = False
    """True if the directory did not exist and was created."""

    warnings: list[CargowsError] = field(default_factory=list)
    """Non-fatal VCS_INIT_FAILED / IGNORE_FILE_WRITE_FAILED errors."""


def ensure_repository(
    path: Path,
    vcs: VersionControl,
    *,
    ignore_pattern: str = DEFAULT_IGNORE_PATTERN,
) -> BootstrapResult:
    """Create ``path`` as a new repository if it is not a directory yet.

    Args:
        path: Absolute workspace root.
        vcs: Version control used to initialize the new directory.
        ignore_pattern: Entry written to ``.gitignore``.

    Returns:
        BootstrapResult; ``created`` is False when the directory already
        existed, in which case nothing else is touched.

    Raises:
        CargowsError: DIRECTORY_CREATE_FAILED if the directory cannot be made.
    """
    result = BootstrapResult()
    if path.is_dir():
        return result

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise io_error(ErrorCode.DIRECTORY_CREATE_FAILED, path, e) from e
    result.created = True
    logger.info("Created workspace directory %s", path)

    if not vcs.init(path):
        warning = CargowsError(code=ErrorCode.VCS_INIT_FAILED, context={"path": str(path)})
        logger.warning("%s", warning.message)
        result.warnings.append(warning)

    gitignore = path / ".gitignore"
    if not gitignore.exists():
        try:
            gitignore.write_text(f"{ignore_pattern}\n", encoding="utf-8")
        except OSError as e:
            warning = io_error(ErrorCode.IGNORE_FILE_WRITE_FAILED, gitignore, e)
            logger.warning("%s", warning.message)
            result.warnings.append(warning)

    return result
