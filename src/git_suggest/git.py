"""Git integration: reading working tree changes as hunks."""

from __future__ import annotations

import codecs
import logging
import re
import subprocess

from git_suggest.models import Hunk

logger = logging.getLogger(__name__)

_QUOTED = r'"(?:[^"\\]|\\.)*"'
_FILE_HEADER_RE = re.compile(
    rf"^diff --git (?P<old>{_QUOTED}|a/.+?) (?P<new>{_QUOTED}|b/.+)$"
)


class GitError(Exception):
    """Raised when a git command cannot be run or fails."""

    pass


def run_git(
    args: list[str], cwd: str | None = None, check: bool = True
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the completed process.

    Args:
        args: Arguments passed after ``git``
        cwd: Working directory for the command
        check: Raise GitError on a non-zero exit code

    Raises:
        GitError: If git cannot be executed, or exits non-zero with check set
    """
    cmd = ["git", *args]
    logger.debug(f"Running git command: {' '.join(cmd)}")
    try:
        completed = subprocess.run(
            cmd, cwd=cwd, check=False, text=True, capture_output=True
        )
    except OSError as e:
        raise GitError(f"Failed to execute git: {e}") from e

    if check and completed.returncode != 0:
        logger.debug(f"git stderr: {completed.stderr}")
        raise GitError(f"git command failed: {' '.join(cmd)}")

    return completed


def _header_path(raw: str) -> str:
    """Path from a ``diff --git`` header field, with quoting and the ``b/`` prefix removed.

    git quotes paths with special or non-ASCII characters C-style, using octal
    escapes for the UTF-8 bytes.
    """
    if raw.startswith('"'):
        raw = codecs.escape_decode(raw[1:-1].encode("utf-8"))[0].decode("utf-8", "replace")
    return raw[2:]


def parse_hunks(raw_diff: str) -> list[Hunk]:
    """Split unified diff output into one Hunk per ``@@`` section.

    File headers (``diff --git``, ``index``, ``---``/``+++``) are dropped;
    each hunk keeps its ``@@`` header line and body.
    """
    hunks: list[Hunk] = []
    file_path: str | None = None
    current: list[str] = []

    def flush() -> None:
        if file_path is not None and current:
            hunks.append(Hunk(file_path=file_path, diff="\n".join(current)))
        current.clear()

    for line in raw_diff.splitlines():
        if line.startswith("diff --git "):
            flush()
            header = _FILE_HEADER_RE.match(line)
            if header:
                file_path = _header_path(header.group("new"))
            else:
                logger.debug(f"Skipping unrecognised diff header: {line}")
                file_path = None
            continue
        if line.startswith("@@"):
            flush()
            current.append(line)
        elif current:
            current.append(line)

    flush()
    return hunks


def read_hunks(staged: bool = True, cwd: str | None = None) -> list[Hunk]:
    """Read hunks from the repository at ``cwd``.

    Args:
        staged: Only staged changes if True, otherwise all changes against HEAD
        cwd: Repository directory, the current directory if None
    """
    args = ["-c", "core.quotePath=false", "diff", "--no-color", "--no-ext-diff"]
    args.append("--cached" if staged else "HEAD")
    completed = run_git(args, cwd=cwd)
    hunks = parse_hunks(completed.stdout)
    logger.info(f"Read {len(hunks)} hunks from git diff")
    return hunks
