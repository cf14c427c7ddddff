"""
Backend implementation that drives the git command line.
"""

import os
import subprocess
import tempfile
from typing import List, Optional

from hunkwise.utils.logging_utils import logger
from ..core.exceptions import BackendError, PatchApplicationError
from .backend import DiffBackend, ImageBytes, PatchDirection, Revision


class GitCliBackend(DiffBackend):
    """Runs git in a repository working tree."""

    def __init__(self, repo_path: str, git_executable: str = 'git'):
        self.repo_path = repo_path
        self.git_executable = git_executable

    def _full_path(self, path: str) -> str:
        return os.path.join(self.repo_path, path)

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.git_executable] + args,
            cwd=self.repo_path,
            capture_output=True,
        )

    def read_file(self, path: str) -> str:
        try:
            with open(self._full_path(path), 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise BackendError(f"Could not read {path}: {e}", details={"path": path})

    def write_file(self, path: str, text: str) -> None:
        try:
            with open(self._full_path(path), 'w', encoding='utf-8', newline='') as f:
                f.write(text)
        except OSError as e:
            raise BackendError(f"Could not write {path}: {e}", details={"path": path})

    def apply_patch(self, patch_text: str, direction: PatchDirection) -> None:
        """
        Apply a patch to the index with ``git apply --cached``.

        Raises:
            PatchApplicationError: With git's stderr if the patch does not apply
        """
        args = ['apply', '--cached', '--unidiff-zero', '--whitespace=nowarn']
        if direction == PatchDirection.UNSTAGE:
            args.append('--reverse')

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='',
                                             suffix='.diff', delete=False) as temp_file:
                temp_file.write(patch_text)
                temp_path = temp_file.name

            git_result = self._run(args + [temp_path])
            stderr = git_result.stderr.decode('utf-8', errors='replace')

            logger.debug(f"Git apply stdout: {git_result.stdout!r}")
            logger.debug(f"Git apply stderr: {stderr}")
            logger.debug(f"Git apply return code: {git_result.returncode}")

            if git_result.returncode != 0:
                logger.warning(f"Git apply failed: {stderr.strip()}")
                raise PatchApplicationError(stderr.strip() or "git apply failed", details={
                    "command": ['git'] + args,
                    "returncode": git_result.returncode,
                    "direction": direction.value,
                })
        finally:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)

    def resolve_conflict(self, path: str, final_text: str) -> None:
        self.write_file(path, final_text)
        git_result = self._run(['add', '--', path])
        if git_result.returncode != 0:
            stderr = git_result.stderr.decode('utf-8', errors='replace').strip()
            raise BackendError(stderr or f"git add failed for {path}",
                               details={"path": path, "returncode": git_result.returncode})

    def _show(self, object_spec: str) -> Optional[bytes]:
        git_result = self._run(['show', object_spec])
        if git_result.returncode != 0:
            logger.debug(f"git show {object_spec} failed: {git_result.stderr!r}")
            return None
        return git_result.stdout

    def _read_bytes(self, path: str) -> Optional[bytes]:
        try:
            with open(self._full_path(path), 'rb') as f:
                return f.read()
        except FileNotFoundError:
            return None

    def get_image_bytes(self, path: str, revision) -> ImageBytes:
        if revision == Revision.WORKING or revision is None:
            old_bytes = self._show(f':{path}')
            new_bytes = self._read_bytes(path)
        elif revision == Revision.STAGED:
            old_bytes = self._show(f'HEAD:{path}')
            new_bytes = self._show(f':{path}')
        else:
            old_bytes = self._show(f'{revision}^:{path}')
            new_bytes = self._show(f'{revision}:{path}')

        extension = os.path.splitext(path)[1].lstrip('.').lower()
        return ImageBytes(old_bytes=old_bytes, new_bytes=new_bytes, format=extension or None)
