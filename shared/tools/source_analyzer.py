"""
Source analysis: extracts infrastructure-relevant files from an application.

Supports local directories and git URLs (shallow-cloned into a temporary
directory that is removed afterwards). The resulting CodeContext is what the
command generator reads to propose discovery commands.
"""
from __future__ import annotations

from pathlib import Path
import shutil
import tempfile
from typing import List

from config.constants import (
    GIT_HOSTS,
    INFRA_FILES,
    INFRA_GLOBS,
    MAX_README_LINES,
    MAX_SOURCE_FILE_BYTES,
)
from shared.models.discovery import CodeContext, FileContent
from shared.models.errors import SourceAnalysisError
from shared.security_tools.common import run_command

GIT_CLONE_TIMEOUT_SECONDS = 120


def is_git_url(source: str) -> bool:
    if source.startswith("git@"):
        return True
    if source.startswith(("https://", "http://")):
        return source.endswith(".git") or any(host in source for host in GIT_HOSTS)
    return False


def _read_limited(path: Path, name: str) -> str | None:
    if not path.is_file():
        return None
    try:
        with open(path, "rb") as fh:
            data = fh.read(MAX_SOURCE_FILE_BYTES)
    except OSError:
        return None
    content = data.decode("utf-8", errors="replace")
    if name.lower() == "readme.md":
        lines = content.split("\n")
        if len(lines) > MAX_README_LINES:
            content = "\n".join(lines[:MAX_README_LINES])
    return content


def _analyze_local_path(root: Path) -> CodeContext:
    if not root.exists():
        raise SourceAnalysisError(f"stat {root}: no such file or directory")
    if not root.is_dir():
        raise SourceAnalysisError(f"{root} is not a directory")

    files: List[FileContent] = []
    seen: set[str] = set()

    for name in INFRA_FILES:
        content = _read_limited(root / name, name)
        if content is None:
            continue
        files.append(FileContent(path=name, content=content))
        seen.add(name)

    for pattern in INFRA_GLOBS:
        for match in sorted(root.glob(pattern)):
            rel_path = match.relative_to(root).as_posix()
            if rel_path in seen:
                continue
            content = _read_limited(match, rel_path)
            if content is None:
                continue
            files.append(FileContent(path=rel_path, content=content))
            seen.add(rel_path)

    return CodeContext(
        files=files,
        summary=f"Analyzed local path: {root}, found {len(files)} infrastructure-relevant files",
    )


def _analyze_git_repo(url: str) -> CodeContext:
    if shutil.which("git") is None:
        raise SourceAnalysisError("git is not installed")
    tmp_dir = tempfile.mkdtemp(prefix="infraplane-analyze-")
    try:
        result = run_command(
            ["git", "clone", "--depth", "1", url, tmp_dir],
            timeout_seconds=GIT_CLONE_TIMEOUT_SECONDS,
        )
        if result is None or result.returncode != 0:
            detail = (result.stderr.strip() if result is not None else "") or "clone failed"
            raise SourceAnalysisError(f"git clone {url}: {detail}")
        context = _analyze_local_path(Path(tmp_dir))
        context.summary = f"Analyzed git repository: {url}"
        return context
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)


def analyze_source(source_path: str) -> CodeContext:
    """Read infrastructure-relevant files from a local path or git URL."""
    if not source_path or not source_path.strip():
        raise SourceAnalysisError("source path is empty")
    source_path = source_path.strip()
    if is_git_url(source_path):
        return _analyze_git_repo(source_path)
    return _analyze_local_path(Path(source_path).expanduser())
