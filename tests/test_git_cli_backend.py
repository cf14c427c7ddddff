"""
Integration tests for the git command line backend.
"""

import io
import shutil
import subprocess

import pytest
from PIL import Image

from hunkwise.utils.diff_utils.application.backend import PatchDirection, Revision
from hunkwise.utils.diff_utils.application.git_apply import GitCliBackend
from hunkwise.utils.diff_utils.application.staging import stage_lines, unstage_lines
from hunkwise.utils.diff_utils.core.exceptions import BackendError, PatchApplicationError
from hunkwise.utils.diff_utils.core.models import LineKey
from hunkwise.utils.diff_utils.parsing.diff_parser import parse_unified_diff

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available"),
]


def git(repo, *args):
    result = subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)
    return result.stdout.decode("utf-8")


def png_bytes(color):
    buffer = io.BytesIO()
    Image.new("RGBA", (2, 2), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def repo(tmp_path):
    git(tmp_path, "init", "-q")
    git(tmp_path, "config", "user.email", "dev@example.com")
    git(tmp_path, "config", "user.name", "Dev")
    git(tmp_path, "config", "core.autocrlf", "false")
    (tmp_path / "file.txt").write_bytes(b"a\nb\nc\n")
    git(tmp_path, "add", "file.txt")
    git(tmp_path, "commit", "-q", "-m", "initial")
    return tmp_path


class TestGitCliBackend:
    """Test the backend against a real repository."""

    def test_stage_and_unstage_single_line(self, repo):
        backend = GitCliBackend(str(repo))
        (repo / "file.txt").write_bytes(b"a\nB\nc\nd\n")

        unstaged = parse_unified_diff(git(repo, "diff"))
        hunk = unstaged.hunks[0]
        addition = next(i for i, line in enumerate(hunk.lines) if line.content == "d")
        stage_lines(backend, unstaged, [LineKey(0, addition)])

        assert git(repo, "show", ":file.txt") == "a\nb\nc\nd\n"
        assert "-b\n+B\n" in git(repo, "diff")

        staged = parse_unified_diff(git(repo, "diff", "--cached"))
        added = next(i for i, line in enumerate(staged.hunks[0].lines) if line.content == "d")
        unstage_lines(backend, staged, [LineKey(0, added)])

        assert git(repo, "show", ":file.txt") == "a\nb\nc\n"
        assert git(repo, "diff", "--cached") == ""

    def test_unselected_deletion_stays_in_index(self, repo):
        backend = GitCliBackend(str(repo))
        (repo / "file.txt").write_bytes(b"a\nc\nnew\n")

        diff_file = parse_unified_diff(git(repo, "diff"))
        hunk = diff_file.hunks[0]
        addition = next(i for i, line in enumerate(hunk.lines) if line.content == "new")
        stage_lines(backend, diff_file, [LineKey(0, addition)])

        assert git(repo, "show", ":file.txt") == "a\nb\nc\nnew\n"

    def test_stage_addition_after_line_without_newline(self, repo):
        backend = GitCliBackend(str(repo))
        (repo / "f.txt").write_bytes(b"a\nb")
        git(repo, "add", "f.txt")
        git(repo, "commit", "-q", "-m", "no newline")
        (repo / "f.txt").write_bytes(b"a\nc\n")

        diff_file = parse_unified_diff(git(repo, "diff", "--", "f.txt"))
        hunk = diff_file.hunks[0]
        addition = next(i for i, line in enumerate(hunk.lines) if line.content == "c")
        stage_lines(backend, diff_file, [LineKey(0, addition)])

        assert git(repo, "show", ":f.txt") == "a\nb\nc\n"

    def test_unstage_deletion_of_line_without_newline(self, repo):
        backend = GitCliBackend(str(repo))
        (repo / "f.txt").write_bytes(b"a\nb")
        git(repo, "add", "f.txt")
        git(repo, "commit", "-q", "-m", "no newline")
        (repo / "f.txt").write_bytes(b"a\nc\n")
        git(repo, "add", "f.txt")

        staged = parse_unified_diff(git(repo, "diff", "--cached", "--", "f.txt"))
        hunk = staged.hunks[0]
        deletion = next(i for i, line in enumerate(hunk.lines) if line.content == "b")
        unstage_lines(backend, staged, [LineKey(0, deletion)])

        assert git(repo, "show", ":f.txt") == "a\nb\nc\n"

    def test_rejected_patch(self, repo):
        backend = GitCliBackend(str(repo))
        patch = "--- a/file.txt\n+++ b/file.txt\n@@ -1,2 +1,2 @@\n x\n-y\n+z\n"
        with pytest.raises(PatchApplicationError) as excinfo:
            backend.apply_patch(patch, PatchDirection.STAGE)
        assert excinfo.value.message
        assert excinfo.value.details["returncode"] != 0
        assert excinfo.value.details["direction"] == "stage"

    def test_resolve_conflict_stages_file(self, repo):
        backend = GitCliBackend(str(repo))
        backend.resolve_conflict("file.txt", "resolved\n")
        assert backend.read_file("file.txt") == "resolved\n"
        assert git(repo, "show", ":file.txt") == "resolved\n"

    def test_read_missing_file(self, repo):
        with pytest.raises(BackendError):
            GitCliBackend(str(repo)).read_file("missing.txt")

    def test_line_endings_preserved(self, repo):
        backend = GitCliBackend(str(repo))
        backend.write_file("crlf.txt", "one\r\ntwo\r\n")
        assert (repo / "crlf.txt").read_bytes() == b"one\r\ntwo\r\n"
        assert backend.read_file("crlf.txt") == "one\r\ntwo\r\n"

    def test_image_bytes(self, repo):
        backend = GitCliBackend(str(repo))
        red, blue = png_bytes((255, 0, 0, 255)), png_bytes((0, 0, 255, 255))
        (repo / "logo.png").write_bytes(red)
        git(repo, "add", "logo.png")
        git(repo, "commit", "-q", "-m", "logo")
        (repo / "logo.png").write_bytes(blue)

        working = backend.get_image_bytes("logo.png", Revision.WORKING)
        assert working.old_bytes == red
        assert working.new_bytes == blue
        assert working.format == "png"

        staged = backend.get_image_bytes("logo.png", Revision.STAGED)
        assert staged.old_bytes == staged.new_bytes == red

        commit = git(repo, "rev-parse", "HEAD").strip()
        history = backend.get_image_bytes("logo.png", commit)
        assert history.old_bytes is None
        assert history.new_bytes == red

    def test_untracked_image(self, repo):
        (repo / "new.png").write_bytes(png_bytes((0, 255, 0, 255)))
        image = GitCliBackend(str(repo)).get_image_bytes("new.png", Revision.WORKING)
        assert image.old_bytes is None
        assert image.new_bytes is not None
