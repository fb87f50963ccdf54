"""CLI entry point for change-review."""
import argparse
import asyncio
from dotenv import load_dotenv
import json
import logging
import os
import sys
import traceback
from pathlib import Path

from change_review.changeset import ChangeSetError, ChangeSetStore, StorageIOError
from change_review.models import ChangeSetStatus, DiffResult, FileModification
from change_review.storage import WorkspaceStorage
from change_review.utils.diff_engine import (
    compute_diff,
    diff_to_modifications,
    generate_unified_diff,
)

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_CHANGESET_ERROR = 2
EXIT_STORAGE_ERROR = 3
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

# Environment overrides
ENV_WORKSPACE = "CHANGE_REVIEW_WORKSPACE"
ENV_ENCODING = "CHANGE_REVIEW_ENCODING"

# Defaults
DEFAULT_ENCODING = "utf-8"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="change-review",
        description="Diff two versions of a file into reviewable line edits",
    )
    parser.add_argument("original", type=str, help="Path to the original file")
    parser.add_argument("modified", type=str, help="Path to the proposed version")
    parser.add_argument(
        "--workspace",
        type=str,
        default=os.getenv(ENV_WORKSPACE) or ".",
        help=f"Workspace root for --accept-all writes (default: ${ENV_WORKSPACE} or cwd)",
    )
    parser.add_argument(
        "--target",
        type=str,
        default="",
        help="Workspace-relative path to write (default: ORIGINAL relative to the workspace)",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        default=os.getenv(ENV_ENCODING) or DEFAULT_ENCODING,
        help=f"File encoding (default: ${ENV_ENCODING} or {DEFAULT_ENCODING})",
    )
    parser.add_argument(
        "--accept-all",
        action="store_true",
        help="Accept every modification and write the result to the target file",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print config and exit without running"
    )
    parser.add_argument(
        "--output-json", action="store_true", help="Output results as JSON"
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def read_input_file(raw_path: str, encoding: str) -> str:
    """Read one of the two input files.

    Raises:
        SystemExit: If the file cannot be read.
    """
    path = Path(raw_path)
    if not path.is_file():
        print(f"Error: '{raw_path}' is not a readable file.", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    try:
        with path.open("r", encoding=encoding, newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read '{raw_path}': {exc}", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT) from exc


def resolve_target(original_path: str, target: str, workspace: Path) -> str:
    """Return the workspace-relative path that --accept-all writes.

    Raises:
        SystemExit: If ORIGINAL lies outside the workspace and no target is given.
    """
    if target:
        return target
    resolved = Path(original_path).resolve()
    if not resolved.is_relative_to(workspace):
        print(
            f"Error: '{original_path}' is outside workspace '{workspace}'; pass --target.",
            file=sys.stderr,
        )
        raise SystemExit(EXIT_INVALID_INPUT)
    return resolved.relative_to(workspace).as_posix()


async def accept_file(
    storage: WorkspaceStorage,
    file_path: str,
    original_content: str,
    diff: DiffResult,
) -> ChangeSetStatus:
    """Create a one-file change set and accept all of it."""
    store = ChangeSetStore(storage)
    change_set = store.create_change_set([
        FileModification(
            file_path=file_path,
            original_content=original_content,
            modifications=diff_to_modifications(diff),
        )
    ])
    await store.accept_all(change_set.id)
    return store.get_change_set_status(change_set.id)


def format_result_json(result: dict) -> str:
    """Serialize result dict to JSON string.

    Calls .model_dump() on Pydantic model values.
    """

    def _serialize(obj):
        if obj is None:
            return None
        if hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json")
        return obj

    prepared = {k: _serialize(v) for k, v in result.items()}
    return json.dumps(prepared, indent=2, default=str)


def print_result_human(result: dict) -> None:
    """Print results in human-readable format."""
    diff: DiffResult = result["diff"]
    print(f"\n{'='*60}")
    print(f"Changes for {result['file_path']}")
    print(f"{'='*60}")

    if not diff.hunks:
        print("\nNo changes.")
    else:
        stats = diff.stats
        print(
            f"\nHunks: {len(diff.hunks)} "
            f"(+{stats.additions} -{stats.deletions} ~{stats.modifications} lines)"
        )
        for hunk in diff.hunks:
            print(f"  {hunk.type.value:<6} lines {hunk.line_start}-{hunk.line_end}")
        print()
        print(result["unified_diff"])

    status = result.get("change_set")
    if status is not None:
        print(
            f"\nChange set {status.id}: {status.status.value}, "
            f"{status.accepted_modifications}/{status.total_modifications} accepted"
        )

    print(f"\n{'='*60}")


def print_config_human(config: dict) -> None:
    """Print configuration in human-readable format."""
    print("\nConfiguration:")
    print(f"{'='*40}")
    for key, value in config.items():
        print(f"  {key}: {value}")
    print(f"{'='*40}")


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    workspace = Path(args.workspace).resolve()
    config = {
        "original": args.original,
        "modified": args.modified,
        "workspace": str(workspace),
        "target": args.target,
        "encoding": args.encoding,
        "accept_all": args.accept_all,
        "verbose": args.verbose,
        "dry_run": args.dry_run,
        "output_json": args.output_json,
    }

    if args.dry_run:
        if args.output_json:
            print(json.dumps(config, indent=2))
        else:
            print_config_human(config)
        return EXIT_SUCCESS

    if args.accept_all and not workspace.is_dir():
        print(f"Error: '{args.workspace}' is not a valid directory.", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        original = read_input_file(args.original, args.encoding)
        modified = read_input_file(args.modified, args.encoding)
        target = (
            resolve_target(args.original, args.target, workspace)
            if args.accept_all
            else args.target or args.original
        )
    except SystemExit as exc:
        return exc.code

    try:
        diff = compute_diff(original, modified)
        result = {
            "file_path": target,
            "diff": diff,
            "unified_diff": generate_unified_diff(target, original, modified),
            "change_set": None,
        }

        if args.accept_all:
            storage = WorkspaceStorage(workspace, encoding=args.encoding)
            result["change_set"] = asyncio.run(
                accept_file(storage, target, original, diff)
            )

        if args.output_json:
            print(format_result_json(result))
        else:
            print_result_human(result)
        return EXIT_SUCCESS

    except StorageIOError as exc:
        return _handle_error("Storage error", exc, args.verbose, EXIT_STORAGE_ERROR)

    except ChangeSetError as exc:
        return _handle_error("Change set error", exc, args.verbose, EXIT_CHANGESET_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)
