from __future__ import annotations

import os
import shutil
import subprocess
import sys
import time
from pathlib import Path
from typing import List, Optional, Union


class GitError(RuntimeError):
    pass


class GitNotFound(GitError):
    pass


class ShallowRepositoryError(RuntimeError):
    pass


def env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}


def verbose_enabled() -> bool:
    return env_flag("GIT_HOURS_VERBOSE")


def ensure_git_available() -> str:
    git = shutil.which("git")
    if not git:
        raise GitNotFound("git not found in PATH. Install git and make sure it is on PATH.")
    return git


def run_git(args: List[str], *, cwd: Optional[Union[str, Path]] = None, verbose: bool = False) -> str:
    """Run `git <args>` and return its stdout.

    Raises GitError with git's own diagnostic text when the command exits
    non-zero. Output is decoded as UTF-8 with replacement so odd author names
    never abort a run.
    """
    git = ensure_git_available()
    cmd = [git] + args

    verbose = verbose or verbose_enabled()
    if verbose:
        print(f"[git] -> {' '.join(cmd)} (cwd={cwd or '.'})", file=sys.stderr)
        start = time.perf_counter()

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as e:
        # Typically a --path that does not exist.
        raise GitError(f"Could not run git in {cwd or '.'}: {e}") from e

    if verbose:
        elapsed = time.perf_counter() - start
        print(f"[git] <- exit={proc.returncode} ({elapsed:.2f}s)", file=sys.stderr)
    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        stdout = (proc.stdout or "").strip()
        msg = stderr or stdout or f"git exited with code {proc.returncode}"
        raise GitError(msg)
    return proc.stdout or ""


def _has_shallow_marker(path: Path) -> bool:
    git_dir = path / ".git"
    if git_dir.is_dir():
        return (git_dir / "shallow").is_file()

    # Bare repository: HEAD and objects/ live at the top level.
    if (path / "HEAD").is_file() and (path / "objects").is_dir():
        return (path / "shallow").is_file()
    return False


def is_shallow_repository(repo_path: Union[str, Path]) -> bool:
    """Return True when the repository at (or above) repo_path is a shallow clone.

    git resolves the real git directory, so subdirectories, linked worktrees
    and submodules are covered. The marker file check is used only when git
    cannot answer, e.g. for a path that is not a repository.
    """
    path = Path(repo_path)
    try:
        answer = run_git(["rev-parse", "--is-shallow-repository"], cwd=path).strip()
    except GitError:
        return _has_shallow_marker(path)

    if answer in {"true", "false"}:
        return answer == "true"
    # git older than 2.15 echoes the unknown option back
    return _has_shallow_marker(path)


def ensure_not_shallow(repo_path: Union[str, Path]) -> None:
    if is_shallow_repository(repo_path):
        raise ShallowRepositoryError(
            "Cannot analyze shallow copies!\n"
            "Please run git fetch --unshallow before continuing!"
        )
