"""Turning parsed patches into commits and applying commits through injected file operations."""

import logging
from typing import Callable, Dict, Iterable, List

from diff.diff_exceptions import DiffError, PatchApplicationError, PatchFormatError
from diff.diff_settings import PatchSettings
from diff.patch_parser import BEGIN_PATCH, identify_files_needed, text_to_patch
from diff.patch_types import (
    Patch,
    PatchAction,
    PatchActionType,
    PatchCommit,
    PatchFileChange,
    PatchValidationResult,
)


logger = logging.getLogger(__name__)


def _get_updated_file(text: str, action: PatchAction, path: str) -> str:
    """
    Apply the chunks of an update action to the original content.

    Args:
        text: Original file content
        action: Update action whose chunks are in original-file order
        path: File path, used in error messages

    Returns:
        Updated file content

    Raises:
        PatchApplicationError: If a chunk lies outside the file or chunks overlap
    """
    if action.type != PatchActionType.UPDATE:
        raise PatchApplicationError(f"{path}: expected an update action, got {action.type.value}")

    orig_lines = text.split('\n')
    dest_lines: List[str] = []
    orig_index = 0

    for chunk in action.chunks:
        if chunk.orig_index > len(orig_lines):
            raise PatchApplicationError(
                f"{path}: chunk.orig_index {chunk.orig_index} > len(lines) {len(orig_lines)}"
            )

        if orig_index > chunk.orig_index:
            raise PatchApplicationError(
                f"{path}: overlapping chunks at {orig_index} > {chunk.orig_index}"
            )

        dest_lines.extend(orig_lines[orig_index:chunk.orig_index])
        dest_lines.extend(chunk.ins_lines)
        orig_index = chunk.orig_index + len(chunk.del_lines)

    dest_lines.extend(orig_lines[orig_index:])
    return '\n'.join(dest_lines)


def patch_to_commit(patch: Patch, orig: Dict[str, str]) -> PatchCommit:
    """
    Resolve a parsed patch into full file contents.

    Args:
        patch: Parsed patch
        orig: Original content of the files the patch updates or deletes

    Returns:
        Commit with one change per patch action
    """
    commit = PatchCommit()
    for path, action in patch.actions.items():
        if action.type == PatchActionType.DELETE:
            commit.changes[path] = PatchFileChange(type=PatchActionType.DELETE, old_content=orig[path])

        elif action.type == PatchActionType.ADD:
            if action.new_file is None:
                raise PatchApplicationError(f"{path}: add action without file content")

            commit.changes[path] = PatchFileChange(type=PatchActionType.ADD, new_content=action.new_file)

        else:
            commit.changes[path] = PatchFileChange(
                type=PatchActionType.UPDATE,
                old_content=orig[path],
                new_content=_get_updated_file(orig[path], action, path),
                move_path=action.move_path
            )

    return commit


def assemble_changes(orig: Dict[str, str], updated: Dict[str, str]) -> PatchCommit:
    """
    Build a commit from two snapshots of file contents.

    Files present in both with different content are updates, files only in orig
    are deletes and files only in updated are adds.  Unchanged files are left out.

    Args:
        orig: Original path to content mapping
        updated: New path to content mapping

    Returns:
        Commit describing the differences
    """
    commit = PatchCommit()
    for path in list(orig) + [p for p in updated if p not in orig]:
        old_content = orig.get(path)
        new_content = updated.get(path)
        if old_content == new_content:
            continue

        if old_content is None:
            commit.changes[path] = PatchFileChange(type=PatchActionType.ADD, new_content=new_content)

        elif new_content is None:
            commit.changes[path] = PatchFileChange(type=PatchActionType.DELETE, old_content=old_content)

        else:
            commit.changes[path] = PatchFileChange(
                type=PatchActionType.UPDATE,
                old_content=old_content,
                new_content=new_content
            )

    return commit


def load_files(paths: Iterable[str], open_fn: Callable[[str], str]) -> Dict[str, str]:
    """
    Load file contents through a caller-supplied function.

    Args:
        paths: Paths to load
        open_fn: Function returning the content of a path

    Returns:
        Path to content mapping.  Any exception from open_fn propagates unchanged.
    """
    files: Dict[str, str] = {}
    for path in paths:
        files[path] = open_fn(path)

    return files


def apply_commit(
    commit: PatchCommit,
    write_fn: Callable[[str, str], None],
    remove_fn: Callable[[str], None]
) -> None:
    """
    Write a commit out through caller-supplied functions.

    Processing stops at the first exception, which propagates unchanged.  Changes
    applied before the failure are not rolled back.

    Args:
        commit: Commit to apply
        write_fn: Function writing content to a path
        remove_fn: Function removing a path
    """
    for path, change in commit.changes.items():
        if change.type == PatchActionType.DELETE:
            logger.debug("Removing %s", path)
            remove_fn(path)
            continue

        if change.new_content is None:
            raise PatchApplicationError(f"{path}: {change.type.value} change has no new content")

        if change.type == PatchActionType.UPDATE and change.move_path:
            logger.debug("Moving %s to %s", path, change.move_path)
            write_fn(change.move_path, change.new_content)
            remove_fn(path)
            continue

        logger.debug("Writing %s", path)
        write_fn(path, change.new_content)


def process_patch(
    text: str,
    open_fn: Callable[[str], str],
    write_fn: Callable[[str, str], None],
    remove_fn: Callable[[str], None],
    settings: PatchSettings | None = None
) -> int:
    """
    Parse a patch and apply it through caller-supplied file operations.

    Args:
        text: Patch text
        open_fn: Function returning the content of a path
        write_fn: Function writing content to a path
        remove_fn: Function removing a path
        settings: Patch settings

    Returns:
        Accumulated fuzz of the patch

    Raises:
        DiffError: If the patch cannot be parsed or resolved
    """
    if not text.strip().startswith(BEGIN_PATCH):
        raise PatchFormatError(f"Patch text must start with {BEGIN_PATCH}")

    orig = load_files(identify_files_needed(text), open_fn)
    patch, fuzz = text_to_patch(text, orig, settings)
    commit = patch_to_commit(patch, orig)
    apply_commit(commit, write_fn, remove_fn)

    logger.debug("Applied patch to %d file(s) with fuzz %d", len(commit.changes), fuzz)
    return fuzz


def validate_patch(
    text: str,
    files: Dict[str, str],
    settings: PatchSettings | None = None
) -> PatchValidationResult:
    """
    Check that a patch would apply exactly, without applying it.

    Args:
        text: Patch text
        files: Current content of the files the patch refers to
        settings: Patch settings

    Returns:
        Validation result.  Patches that only match with fuzz are reported as invalid.
    """
    if not text.strip().startswith(BEGIN_PATCH):
        return PatchValidationResult(valid=False, message=f"Patch must start with {BEGIN_PATCH}")

    for path in identify_files_needed(text):
        if path not in files:
            return PatchValidationResult(valid=False, message=f"File not found: {path}")

    try:
        patch, fuzz = text_to_patch(text, files, settings)
        patch_to_commit(patch, files)

    except DiffError as e:
        return PatchValidationResult(valid=False, message=str(e))

    if fuzz > 0:
        return PatchValidationResult(
            valid=False,
            message=f"Patch contains fuzzy matches (fuzz level: {fuzz})",
            fuzz=fuzz
        )

    return PatchValidationResult(valid=True, message="Patch is valid")
