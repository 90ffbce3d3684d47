"""Last-modified timestamps for content files, from git history or mtime."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
import logging
from pathlib import Path


DEFAULT_GIT_TIMEOUT_SECONDS = 30.0

logger = logging.getLogger(__name__)


async def _run_git(
    *args: str,
    cwd: Path,
    timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS,
) -> tuple[bool, str, str]:
    try:
        proc = await asyncio.create_subprocess_exec(
            "git",
            *args,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        return False, "", f"git unavailable: {exc}"

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.communicate()
        return False, "", f"Timed out after {int(timeout_seconds)}s: git {' '.join(args)}"

    stdout_text = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr_text = stderr_bytes.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        return False, stdout_text, stderr_text or f"git exited with {proc.returncode}"
    return True, stdout_text, stderr_text


class GitLastModified:
    """Resolve a repo-relative path to its last commit time, else its mtime."""

    def __init__(self, repo_root: str | Path, *, timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS) -> None:
        self._repo_root = Path(repo_root)
        self._timeout_seconds = timeout_seconds

    async def __call__(self, relative_path: str) -> datetime:
        relative = relative_path.lstrip("/")
        ok, stdout_text, error = await _run_git(
            "log",
            "-1",
            "--format=%cI",
            "--",
            relative,
            cwd=self._repo_root,
            timeout_seconds=self._timeout_seconds,
        )
        if ok and stdout_text:
            return datetime.fromisoformat(stdout_text.splitlines()[0])
        if not ok:
            logger.debug("git log failed for %s: %s", relative, error)

        # uncommitted or outside a git checkout
        stat = await asyncio.to_thread((self._repo_root / relative).stat)
        return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
