"""
Local git operations for hypersonic.

Reads diffs from a local working tree and pushes a diff to a remote branch
through a temporary clone.
"""

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from ..config.schema import DEFAULT_BASE_URL
from ..errors import GitError

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 120


def clone_host(base_url: str) -> str:
    """Map an API base URL to the host used for git clones.

    https://api.github.com          -> github.com
    https://ghe.example.com/api/v3  -> ghe.example.com
    """
    parsed = urlparse(base_url)
    host = parsed.netloc or parsed.path.split("/")[0]
    if host == "api.github.com":
        return "github.com"
    return host


class GitHandler:
    """Run git commands for local diff and diff-apply operations.

    Usage:
        git = GitHandler(token)
        diff = git.get_local_diff("./my-repo")
        git.apply_diff("org/repo", "update-docs", diff)
    """

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL):
        """Initialize the handler.

        Args:
            token: GitHub token used to authenticate clones and pushes
            base_url: GitHub API base URL, used to derive the clone host
        """
        self.token = token
        self.base_url = base_url

    def _run(self, args: List[str], cwd: Optional[Path] = None) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitError: If git is missing, times out or exits non-zero
        """
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=GIT_TIMEOUT,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git {args[0]} timed out", cause=e) from e
        except FileNotFoundError as e:
            raise GitError("Git is not installed or not in PATH", cause=e) from e

        if result.returncode != 0:
            # Never leak the token into error messages
            error = (result.stderr or result.stdout).strip()
            if self.token:
                error = error.replace(self.token, "***")
            raise GitError(f"git {args[0]} failed: {error}")

        return result.stdout

    def get_local_diff(self, path: str, files: Optional[Sequence[str]] = None) -> str:
        """Return the diff of a working tree against HEAD.

        Args:
            path: Path to the local repository
            files: Limit the diff to these paths

        Returns:
            Unified diff text (empty when nothing changed)
        """
        args = ["diff", "HEAD"]
        if files:
            args += ["--", *files]
        try:
            return self._run(args, cwd=Path(path))
        except GitError as e:
            raise GitError(f"Failed to get local diff: {e}", operation="get local diff", cause=e) from e

    def apply_diff(self, repo: str, branch: str, diff_content: str) -> None:
        """Apply a diff to ``branch`` of a remote repository and push it.

        The branch is created from the default branch when it does not exist.
        The temporary clone is always removed.

        Args:
            repo: Repository in "owner/name" format
            branch: Branch to commit to
            diff_content: Unified diff to apply
        """
        temp_dir = Path(tempfile.mkdtemp(prefix="hypersonic_"))
        clone_path = temp_dir / "repo"
        diff_path = temp_dir / "changes.diff"
        clone_url = f"https://{self.token}@{clone_host(self.base_url)}/{repo}.git"

        try:
            self._run(["clone", clone_url, str(clone_path)])

            try:
                self._run(["checkout", branch], cwd=clone_path)
            except GitError:
                self._run(["checkout", "-b", branch], cwd=clone_path)

            diff_path.write_text(diff_content, encoding="utf-8")
            self._run(["apply", str(diff_path)], cwd=clone_path)
            self._run(["add", "-A"], cwd=clone_path)
            self._run(["commit", "-m", "Apply changes"], cwd=clone_path)
            self._run(["push", "origin", branch], cwd=clone_path)
            logger.info("Applied diff to %s on %s", repo, branch)
        except GitError as e:
            raise GitError(f"Failed to apply diff: {e}", operation="apply diff", cause=e) from e
        except OSError as e:
            raise GitError(f"Failed to apply diff: {e}", operation="apply diff", cause=e) from e
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)
