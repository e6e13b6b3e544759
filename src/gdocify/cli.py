"""Command-line interface for gdocify.

Usage::

    gdocify notes.md                         # print batchUpdate JSON
    gdocify notes.md -o requests.json        # write it to a file
    gdocify notes.md --create "My notes"     # publish a new Google Doc
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from gdocify import __version__
from gdocify.client import GdocifyClient
from gdocify.config import GdocifyConfig
from gdocify.converter.md_to_docs import MarkdownToDocsConverter
from gdocify.errors import GdocifyError

TOKEN_ENV_VAR = "GDOCIFY_ACCESS_TOKEN"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdocify",
        description="Convert Markdown files to Google Docs batchUpdate requests.",
    )
    parser.add_argument(
        "input",
        help="Path to the Markdown file to convert, or '-' for stdin.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Write the request JSON here instead of stdout.",
    )
    parser.add_argument(
        "--create",
        metavar="TITLE",
        help="Create a Google Doc with this title instead of printing requests.",
    )
    parser.add_argument(
        "--token",
        help=f"OAuth access token (default: ${TOKEN_ENV_VAR}).",
    )
    parser.add_argument(
        "-e", "--encoding",
        default="utf-8",
        help="Input file encoding (default: %(default)s).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print progress information to stderr.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _read_input(source: str, encoding: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding=encoding)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.input != "-" and not Path(args.input).is_file():
        print(f"Error: file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        markdown = _read_input(args.input, args.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read {args.input}: {exc}", file=sys.stderr)
        return 1

    if args.create is not None:
        token = args.token or os.environ.get(TOKEN_ENV_VAR, "")
        if not token:
            print(
                f"Error: --create needs an access token (--token or ${TOKEN_ENV_VAR})",
                file=sys.stderr,
            )
            return 2
        try:
            with GdocifyClient(token=token) as client:
                result = client.create_document_from_markdown(args.create, markdown)
        except GdocifyError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        if args.verbose:
            print(f"Applied {result.operations_applied} operations.", file=sys.stderr)
            for warning in result.warnings:
                print(f"Warning [{warning.code}]: {warning.message}", file=sys.stderr)
        print(result.document_url)
        return 0

    try:
        conversion = MarkdownToDocsConverter(GdocifyConfig()).convert(markdown)
    except GdocifyError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    body = json.dumps({"requests": conversion.requests}, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(body + "\n", encoding="utf-8")
        if args.verbose:
            print(
                f"Wrote {len(conversion.operations)} operations to {args.output}",
                file=sys.stderr,
            )
    else:
        print(body)

    if args.verbose:
        for warning in conversion.warnings:
            print(f"Warning [{warning.code}]: {warning.message}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
