"""Command-line interface for headerscope."""

import argparse
import json
import os
import sys
from pathlib import Path

from . import __version__
from .config_store import ConfigStore
from .coverage import CoverageScanner
from .doc_checker import DocCoverageGate
from .errors import HeaderscopeError
from .extractor import extract_declarations
from .git_repo import GitRepo
from .logging import configure_logging
from .report import (
    render_coverage_markdown,
    render_doc_summary,
    report_to_dict,
    write_json,
    write_markdown,
)
from .utils import normalize_path, read_source, truncate_list


def cmd_declarations(args: argparse.Namespace) -> int:
    """List the declarations recovered from one source file."""
    try:
        label = normalize_path(args.path)
        text = read_source(args.path)
        declarations = extract_declarations(
            text, definitions_only=args.definitions_only, path=label
        )
        if args.public_only:
            declarations = [d for d in declarations if d.is_public]

        if args.json:
            data = {
                "path": label,
                "declarations": [d.to_dict() for d in declarations],
            }
            print(json.dumps(data, indent=2))
            return 0

        if not declarations:
            print(f"No declarations found in {label}.")
            return 0

        print(f"{label}: {len(declarations)} declaration(s)")
        print()
        for decl in declarations:
            print(f"  {decl.line:>5}  {decl.kind:<8}  {decl.visibility:<10}  {decl.name}")
        return 0

    except HeaderscopeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_coverage(args: argparse.Namespace) -> int:
    """Build the test coverage matrix for a set of headers and test sources."""
    try:
        config = ConfigStore(Path.cwd()).load()
        scanner = CoverageScanner(config, root=Path.cwd())
        report = scanner.scan(args.headers, args.tests)

        if args.json:
            print(json.dumps(report_to_dict(report), indent=2))
        else:
            print(
                f"Referenced declarations: {report.referenced}/{report.total} "
                f"({report.percentage:.2f}%)"
            )
            if report.unreferenced:
                print()
                print(f"UNREFERENCED ({len(report.unreferenced)}):")
                shown, extra = truncate_list(
                    [f"{d.file}:{d.line} ({d.kind} {d.name})" for d in report.unreferenced],
                    config.max_listed,
                )
                for entry in shown:
                    print(f"  {entry}")
                if extra:
                    print(f"  ... and {extra} more")
            if report.failures:
                print()
                print(f"SKIPPED ({len(report.failures)}):")
                for failure in report.failures:
                    print(f"  {failure.path}: {failure.reason}")

        if args.write_json:
            write_json(report_to_dict(report), args.write_json)
            print(f"Wrote JSON report: {args.write_json}", file=sys.stderr)

        if args.write_md:
            write_markdown(
                render_coverage_markdown(report, config.max_scopes_shown, config.max_listed),
                args.write_md,
            )
            print(f"Wrote markdown report: {args.write_md}", file=sys.stderr)

        return 0

    except HeaderscopeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_doc_check(args: argparse.Namespace) -> int:
    """Check documentation of public declarations added in a diff range."""
    try:
        event_name = os.environ.get("GITHUB_EVENT_NAME", "")
        if event_name != "pull_request" and not args.diff_range:
            print("[skip] not a pull_request event (use --diff-range for local runs)")
            return 0

        repo = GitRepo()
        config = ConfigStore(repo.root).load()
        if args.min is not None:
            config.min_coverage = args.min

        base_ref = args.base_ref or os.environ.get("GITHUB_BASE_REF")
        diff_range = repo.resolve_diff_range(args.diff_range, base_ref)

        gate = DocCoverageGate(repo, config)
        report = gate.run(diff_range)

        if args.summary_file:
            write_markdown(render_doc_summary(report, config.max_listed), args.summary_file)

        if args.json:
            print(json.dumps(report_to_dict(report), indent=2))
            return 0 if report.passed and not report.failures else 1

        for failure in report.failures:
            print(f"[fail] unable to analyze {failure.path}: {failure.reason}")

        if not report.files:
            print("[ok] no in-scope changed headers")
            return 0
        if report.total == 0:
            print("[ok] no in-scope changed public declarations")
            return 1 if report.failures else 0

        print(f"[info] analyzed headers: {len(report.files)}")
        print(
            f"[info] documented declarations: {len(report.documented)}/{report.total} "
            f"({report.percentage:.2f}%)"
        )
        if args.summary_file:
            print(f"[info] summary written to {args.summary_file}")

        min_text = f"{config.min_coverage:g}%"
        if not report.passed:
            print(
                f"[fail] header docstring coverage below threshold: "
                f"{report.percentage:.2f}% < {min_text}"
            )
            shown, extra = truncate_list(
                [
                    f"{row.declaration.file}:{row.declaration.line} "
                    f"({row.declaration.kind} {row.declaration.name})"
                    for row in report.undocumented
                ],
                config.max_listed,
            )
            for entry in shown:
                print(f"[fail] undocumented changed declaration: {entry}")
            if extra:
                print(f"[fail] ... and {extra} more")
            return 1

        print(
            f"[ok] header docstring coverage meets threshold "
            f"({report.percentage:.2f}% >= {min_text})"
        )
        return 1 if report.failures else 0

    except HeaderscopeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server."""
    try:
        import uvicorn

        print("Starting headerscope API server...")
        print(f"API docs: http://{args.host}:{args.port}/docs")
        print()

        # When reload is enabled, uvicorn requires the app as an import string
        app_target = "headerscope.api:app" if args.reload else None
        if app_target is None:
            from .api import app
            app_target = app

        uvicorn.run(
            app_target,
            host=args.host,
            port=args.port,
            reload=args.reload,
        )
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="headerscope",
        description="Recover declarations from C++ headers and measure test and doc coverage.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # declarations
    decl_parser = subparsers.add_parser(
        "declarations", help="List declarations found in a source file"
    )
    decl_parser.add_argument("path", help="Header or source file to analyze")
    decl_parser.add_argument(
        "--definitions-only", action="store_true",
        help="Keep only functions/methods followed by a body",
    )
    decl_parser.add_argument(
        "--public-only", action="store_true", help="Drop private/protected members"
    )
    decl_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # coverage
    coverage_parser = subparsers.add_parser(
        "coverage", help="Map header definitions to the test scopes that call them"
    )
    coverage_parser.add_argument(
        "--headers", nargs="+", required=True, metavar="HEADER", help="Library headers"
    )
    coverage_parser.add_argument(
        "--tests", nargs="+", required=True, metavar="TEST", help="Test sources"
    )
    coverage_parser.add_argument("--json", action="store_true", help="Output as JSON")
    coverage_parser.add_argument(
        "--write-md", "-m", help="Write markdown coverage matrix to path"
    )
    coverage_parser.add_argument(
        "--write-json", "-w", help="Write JSON coverage report to path"
    )

    # doc-check
    doc_parser = subparsers.add_parser(
        "doc-check", help="Check doc comments on public declarations added in a diff"
    )
    doc_parser.add_argument(
        "--min", type=float, help="Minimum coverage percentage (default: config, 80)"
    )
    doc_parser.add_argument(
        "--base-ref", help="Base branch (default: GITHUB_BASE_REF)"
    )
    doc_parser.add_argument(
        "--diff-range", help="Git diff range, e.g. origin/master...HEAD"
    )
    doc_parser.add_argument(
        "--summary-file", help="Write markdown summary to path"
    )
    doc_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", "-p", type=int, default=8000, help="Port to bind to (default: 8000)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, log_file=args.log_file)

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "declarations": cmd_declarations,
        "coverage": cmd_coverage,
        "doc-check": cmd_doc_check,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
