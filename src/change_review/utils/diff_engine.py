"""Line diffing and modification splicing.

Every function here is pure: no storage access, no shared state. Line
numbers are 1-based and inclusive, always in the original text's line space.
"""

import difflib
import uuid

from change_review.models import (
    DiffHunk,
    DiffResult,
    DiffStats,
    FileModification,
    Modification,
    ModificationStatus,
    ModificationType,
)

LINE_SEPARATOR = "\n"


def split_lines(text: str) -> list[str]:
    """Split text on newlines. An empty text is a single empty line."""
    return text.split(LINE_SEPARATOR)


def join_lines(lines: list[str]) -> str:
    return LINE_SEPARATOR.join(lines)


def compute_diff(original: str, modified: str) -> DiffResult:
    """Compute the line-range differences between two texts.

    Args:
        original: Text before the edit.
        modified: Text after the edit.

    Returns:
        DiffResult with hunks in document order. Applying every hunk to
        ``original`` from the bottom up yields ``modified``.
    """
    if original == modified:
        return DiffResult()

    original_lines = split_lines(original)
    modified_lines = split_lines(modified)

    # autojunk would make matching depend on line popularity in long texts
    matcher = difflib.SequenceMatcher(
        None, original_lines, modified_lines, autojunk=False
    )

    hunks: list[DiffHunk] = []
    stats = DiffStats()
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if tag == "insert":
            hunks.append(DiffHunk(
                type=ModificationType.ADD,
                line_start=i1 + 1,
                line_end=i1 + (j2 - j1),
                modified_text=join_lines(modified_lines[j1:j2]),
            ))
            stats.additions += j2 - j1
        elif tag == "delete":
            hunks.append(DiffHunk(
                type=ModificationType.DELETE,
                line_start=i1 + 1,
                line_end=i2,
                original_text=join_lines(original_lines[i1:i2]),
            ))
            stats.deletions += i2 - i1
        else:  # replace
            hunks.append(DiffHunk(
                type=ModificationType.MODIFY,
                line_start=i1 + 1,
                line_end=i2,
                original_text=join_lines(original_lines[i1:i2]),
                modified_text=join_lines(modified_lines[j1:j2]),
            ))
            stats.modifications += i2 - i1

    return DiffResult(hunks=hunks, stats=stats)


def _classify(hunk: DiffHunk) -> ModificationType:
    if hunk.original_text is None:
        return ModificationType.ADD
    if hunk.modified_text is None:
        return ModificationType.DELETE
    return ModificationType.MODIFY


def new_modification_id() -> str:
    return f"mod-{uuid.uuid4().hex}"


def diff_to_modifications(diff: DiffResult) -> list[Modification]:
    """Turn diff hunks into pending modifications with fresh ids.

    Args:
        diff: Result of compute_diff.

    Returns:
        One Modification per hunk, in hunk order.
    """
    return [
        Modification(
            id=new_modification_id(),
            type=_classify(hunk),
            line_start=hunk.line_start,
            line_end=hunk.line_end,
            original_text=hunk.original_text,
            modified_text=hunk.modified_text,
            status=ModificationStatus.PENDING,
        )
        for hunk in diff.hunks
    ]


def _splice(lines: list[str], modification: Modification) -> None:
    start = modification.line_start - 1
    end = modification.line_end  # Exclusive slice bound
    new_lines = split_lines(modification.modified_text or "")

    if modification.type == ModificationType.ADD:
        lines[start:start] = new_lines
    elif modification.type == ModificationType.DELETE:
        del lines[start:end]
    else:
        lines[start:end] = new_lines


def apply_modification(content: str, modification: Modification) -> str:
    """Splice a single modification into ``content``, whatever its status.

    Ranges past the end of the content are clamped, never raised on.
    """
    lines = split_lines(content)
    _splice(lines, modification)
    return join_lines(lines)


def _bottom_up(modification: Modification) -> tuple[int, bool]:
    # On equal line_start, a delete/modify must run before an insert there
    return modification.line_start, modification.type != ModificationType.ADD


def apply_modifications(original: str, modifications: list[Modification]) -> str:
    """Apply the accepted modifications to ``original``.

    Modifications are applied from the highest line_start down so earlier
    splices never shift the line numbers of later ones. Pending and rejected
    modifications are ignored.

    Args:
        original: Snapshot text the modifications were computed against.
        modifications: Modifications in any order and any status.

    Returns:
        The resulting text, or ``original`` itself if nothing is accepted.
    """
    accepted = [
        mod for mod in modifications if mod.status == ModificationStatus.ACCEPTED
    ]
    if not accepted:
        return original

    lines = split_lines(original)
    for mod in sorted(accepted, key=_bottom_up, reverse=True):
        _splice(lines, mod)
    return join_lines(lines)


def make_file_modification(
    file_path: str,
    original_content: str,
    modified_content: str,
) -> FileModification:
    """Diff two versions of a file into a FileModification ready for review."""
    diff = compute_diff(original_content, modified_content)
    return FileModification(
        file_path=file_path,
        original_content=original_content,
        modifications=diff_to_modifications(diff),
    )


def generate_unified_diff(
    file_path: str,
    original_content: str,
    modified_content: str,
) -> str:
    """Generate a git-style unified diff for display.

    Args:
        file_path: Path shown in the a/ b/ headers.
        original_content: File content before the edit.
        modified_content: File content after the edit.

    Returns:
        Unified diff string. Empty string if no changes.
    """
    if original_content == modified_content:
        return ""

    diff_gen = difflib.unified_diff(
        split_lines(original_content),
        split_lines(modified_content),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
        lineterm="",
    )
    return join_lines(list(diff_gen))
