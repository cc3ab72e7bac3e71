"""Main CLI entry point for the Git DSL engine."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import SessionConfig
from .dsl import VIEWS
from .errors import GitDSLError
from .logging_utils import configure_logging
from .serialize import DSLSerializer
from .settings import get_default_repo_path, get_line_separator
from .vcs import open_local_session


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="gitdsl",
        description="Per-file text, structured and JSON diffs between two revisions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gitdsl --repo . --base main --head feature
  gitdsl --repo . --base v1.0 --head v2.0 --file package.json --view json-diff
  gitdsl --repo /path/to/repo --base abc123 --head def456 \\
         --file src/app.py --view text --separator '\\n' --json output.json
        """,
    )

    parser.add_argument(
        "--repo",
        default=None,
        help="Local repository path (default: $GITDSL_REPO_PATH or current directory)",
    )
    parser.add_argument(
        "--base",
        required=True,
        help="Base revision",
    )
    parser.add_argument(
        "--head",
        required=True,
        help="Head revision",
    )

    parser.add_argument(
        "--file",
        help="File to show a diff view for; omit to list the changed files",
    )
    parser.add_argument(
        "--view",
        choices=VIEWS,
        default="text",
        help="Diff view for --file (default: text)",
    )
    parser.add_argument(
        "--separator",
        default=None,
        help="Line separator for the text view (default: $GITDSL_LINE_SEPARATOR or OS newline)",
    )
    parser.add_argument(
        "--context",
        type=int,
        default=3,
        help="Number of context lines in diffs (default: 3)",
    )
    parser.add_argument(
        "--find-renames",
        type=int,
        default=90,
        help="Rename detection threshold percentage (default: 90)",
    )
    parser.add_argument(
        "--json",
        help="Output JSON to file instead of stdout",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments."""
    if args.context < 0:
        raise ValueError("--context cannot be negative")
    if not (0 <= args.find_renames <= 100):
        raise ValueError("--find-renames must be between 0 and 100")
    if args.separator == "":
        raise ValueError("--separator cannot be empty")


def create_config(args: argparse.Namespace) -> SessionConfig:
    """Create configuration from command line arguments."""
    separator = args.separator
    if separator is None:
        separator = get_line_separator()
    else:
        separator = separator.encode("utf-8").decode("unicode_escape")

    return SessionConfig(
        base_sha=args.base,
        head_sha=args.head,
        repo=resolve_repo_path(args.repo),
        line_separator=separator,
        context_lines=args.context,
        find_renames_threshold=args.find_renames,
    )


def resolve_repo_path(repo: Optional[str]) -> str:
    """Pick the repository from the flag, the environment, or the cwd."""
    return repo or get_default_repo_path() or str(Path.cwd())


async def process_request(
    config: SessionConfig, filename: Optional[str], view: str
) -> Dict[str, Any]:
    """Open a session and return the payload for the request."""
    dsl = await open_local_session(config.repo, config)
    serializer = DSLSerializer()

    if filename is None:
        payload = serializer.serialize_snapshot(dsl.snapshot)
    else:
        result = await dsl.view_for_file(filename, view)
        payload = {
            "file": filename,
            "status": dsl.snapshot.classify(filename),
            "view": view,
            "result": serializer.serialize_view(view, result),
        }
    return serializer.attach_provenance(payload, config)


def output_result(result: dict, output_path: Optional[str]) -> None:
    """Output result to stdout or file."""
    json_str = DSLSerializer().to_json_string(result)

    if output_path:
        Path(output_path).write_text(json_str, encoding="utf-8")
    else:
        print(json_str)


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else "WARNING", force=args.verbose)
    serializer = DSLSerializer()

    try:
        validate_args(args)
        config = create_config(args)

        payload = asyncio.run(process_request(config, args.file, args.view))

        output_result(serializer.create_success_envelope(payload), args.json)
        return 0

    except GitDSLError as e:
        result = serializer.create_error_envelope(e.code, e.message, e.details)
        output_result(result, args.json)
        return 1

    except Exception as e:
        result = serializer.create_error_envelope(
            "INTERNAL_ERROR",
            f"Internal error: {str(e)}",
            {"type": type(e).__name__}
        )
        output_result(result, args.json)
        return 1


if __name__ == "__main__":
    sys.exit(main())
