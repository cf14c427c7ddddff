"""
Utilities for parsing diff text produced by the backend.

The backend computes diffs; this module only turns its unified diff output
into DiffFile values. Parsing never raises: lines that do not fit the format
are skipped.
"""

import os
import re
from typing import List, Optional, Sequence

from hunkwise.utils.logging_utils import logger
from ..core.config import IMAGE_EXTENSIONS
from ..core.models import DiffFile, DiffHunk, DiffLine, FileStatus, LineOrigin
from ..core.utils import format_hunk_header, parse_hunk_header

NO_NEWLINE_MARKER = "\\ No newline at end of file"

_EOFNL_ORIGINS = {
    LineOrigin.CONTEXT: LineOrigin.CONTEXT_EOFNL,
    LineOrigin.ADDITION: LineOrigin.ADD_EOFNL,
    LineOrigin.DELETION: LineOrigin.DEL_EOFNL,
}


def extract_target_file_from_diff(diff_content: str) -> Optional[str]:
    """
    Extract the target file path from a git diff.
    Returns None if no valid target file path is found.

    Args:
        diff_content: The diff content to parse

    Returns:
        The target file path, or None if not found
    """
    if not diff_content:
        return None

    for line in diff_content.splitlines():
        if line.startswith('+++ b/'):
            return line[6:]

        if line.startswith('+++ ') and not line.startswith('+++ /dev/null'):
            return line[4:].strip()

        # For deleted files
        if line.startswith('--- a/'):
            return line[6:]

        if line.startswith('diff --git'):
            parts = line.split(' b/', 1)
            if len(parts) > 1:
                return parts[1]

    return None


def split_combined_diff(diff_content: str) -> List[str]:
    """
    Split a combined diff containing multiple files into individual file diffs.

    Args:
        diff_content: The combined diff content

    Returns:
        A list of individual diff strings
    """
    if not diff_content:
        return []

    if not re.search(r'(?m)^diff --git ', diff_content):
        return [diff_content]

    parts = re.split(r'(?m)^diff --git ', diff_content)
    if parts and not parts[0].strip():
        parts.pop(0)

    return ['diff --git ' + part for part in parts if part.strip()]


def is_image_path(path: Optional[str]) -> bool:
    """Check if a path has a raster image extension."""
    if not path:
        return False
    return os.path.splitext(path)[1].lower() in IMAGE_EXTENSIONS


def _strip_path_prefix(path: str) -> Optional[str]:
    path = path.split('\t', 1)[0].strip()
    if path == '/dev/null':
        return None
    if path.startswith('a/') or path.startswith('b/'):
        return path[2:]
    return path


def build_hunk(old_start: int, new_start: int, lines: Sequence[DiffLine]) -> DiffHunk:
    """
    Build a hunk whose header counts are derived from its lines.

    Args:
        old_start: First old-side line number covered by the hunk
        new_start: First new-side line number covered by the hunk
        lines: The hunk body

    Returns:
        A DiffHunk with a consistent header
    """
    old_count = sum(1 for line in lines if line.origin in (LineOrigin.CONTEXT, LineOrigin.DELETION))
    new_count = sum(1 for line in lines if line.origin in (LineOrigin.CONTEXT, LineOrigin.ADDITION))
    return DiffHunk(
        header=format_hunk_header(old_start, old_count, new_start, new_count),
        old_start=old_start,
        old_lines=old_count,
        new_start=new_start,
        new_lines=new_count,
        lines=tuple(lines),
    )


class _HunkBuilder:
    """Accumulates the body of one hunk while tracking line numbers."""

    def __init__(self, header: str, old_start: int, old_count: int, new_start: int, new_count: int):
        self.header = header
        self.old_start = old_start
        self.old_count = old_count
        self.new_start = new_start
        self.new_count = new_count
        self.old_remaining = old_count
        self.new_remaining = new_count
        self.old_no = old_start
        self.new_no = new_start
        self.lines: List[DiffLine] = []

    @property
    def body_complete(self) -> bool:
        return self.old_remaining <= 0 and self.new_remaining <= 0

    def add(self, raw: str) -> bool:
        """Add one raw body line. Returns False if the line does not belong to the hunk."""
        if raw.startswith('\\'):
            if not self.lines:
                return False
            previous = self.lines[-1].origin
            origin = _EOFNL_ORIGINS.get(previous)
            if origin is None:
                return False
            self.lines.append(DiffLine(NO_NEWLINE_MARKER, origin))
            return True

        if self.body_complete:
            return False

        # Some tools strip the single space from blank context lines
        prefix = raw[:1] if raw else ' '
        content = raw[1:]
        if prefix == ' ':
            self.lines.append(DiffLine(content, LineOrigin.CONTEXT, self.old_no, self.new_no))
            self.old_no += 1
            self.new_no += 1
            self.old_remaining -= 1
            self.new_remaining -= 1
        elif prefix == '-':
            self.lines.append(DiffLine(content, LineOrigin.DELETION, self.old_no, None))
            self.old_no += 1
            self.old_remaining -= 1
        elif prefix == '+':
            self.lines.append(DiffLine(content, LineOrigin.ADDITION, None, self.new_no))
            self.new_no += 1
            self.new_remaining -= 1
        else:
            return False
        return True

    def build(self) -> DiffHunk:
        return DiffHunk(
            header=self.header,
            old_start=self.old_start,
            old_lines=self.old_count,
            new_start=self.new_start,
            new_lines=self.new_count,
            lines=tuple(self.lines),
        )


def parse_unified_diff(diff_content: str, path: Optional[str] = None,
                       status: Optional[FileStatus] = None) -> DiffFile:
    """
    Parse a single-file unified diff into a DiffFile.

    Args:
        diff_content: Unified diff text for one file
        path: Path to use when the diff headers do not name the file
        status: Status to use instead of the one inferred from the headers

    Returns:
        The parsed DiffFile; a diff with no recognisable hunks yields a
        DiffFile with no hunks
    """
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    git_old: Optional[str] = None
    git_new: Optional[str] = None
    inferred = FileStatus.MODIFIED
    old_is_null = new_is_null = False
    is_binary = False
    hunks: List[DiffHunk] = []
    current: Optional[_HunkBuilder] = None

    for raw in (diff_content or '').split('\n'):
        if raw.startswith('@@'):
            numbers = parse_hunk_header(raw)
            if numbers is None:
                logger.debug(f"Skipping malformed hunk header: {raw!r}")
                continue
            if current is not None:
                hunks.append(current.build())
            current = _HunkBuilder(raw.strip(), *numbers)
            continue

        if current is not None and current.add(raw):
            continue

        if raw.startswith('diff --git '):
            match = re.match(r'diff --git a/(.*) b/(.*)$', raw)
            if match:
                git_old, git_new = match.group(1), match.group(2)
        elif raw.startswith('--- '):
            old_path = _strip_path_prefix(raw[4:])
            old_is_null = old_path is None
        elif raw.startswith('+++ '):
            new_path = _strip_path_prefix(raw[4:])
            new_is_null = new_path is None
        elif raw.startswith('new file mode'):
            inferred = FileStatus.NEW
        elif raw.startswith('deleted file mode'):
            inferred = FileStatus.DELETED
        elif raw.startswith('rename from '):
            git_old = raw[len('rename from '):].strip()
            inferred = FileStatus.RENAMED
        elif raw.startswith('rename to '):
            git_new = raw[len('rename to '):].strip()
            inferred = FileStatus.RENAMED
        elif raw.startswith('Binary files ') or raw.startswith('GIT binary patch'):
            is_binary = True

    if current is not None:
        hunks.append(current.build())

    if old_is_null:
        inferred = FileStatus.NEW
    elif new_is_null:
        inferred = FileStatus.DELETED

    source = old_path or git_old
    target = new_path or git_new
    if inferred == FileStatus.MODIFIED and source and target and source != target:
        inferred = FileStatus.RENAMED

    file_path = path or target or source or ''
    additions = sum(1 for hunk in hunks for line in hunk.lines if line.origin == LineOrigin.ADDITION)
    deletions = sum(1 for hunk in hunks for line in hunk.lines if line.origin == LineOrigin.DELETION)
    final_status = status or inferred

    logger.debug(f"Parsed diff for {file_path}: {len(hunks)} hunk(s), +{additions} -{deletions}")

    return DiffFile(
        path=file_path,
        old_path=source if final_status == FileStatus.RENAMED else None,
        status=final_status,
        hunks=tuple(hunks),
        is_binary=is_binary,
        is_image=is_image_path(file_path),
        additions=additions,
        deletions=deletions,
    )
