"""CLI for blockast - compile document ASTs into rich-text blocks."""

import argparse
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.loader import dumps, load_ast
from .adapters.raw_export import to_raw
from .core.compiler import compile
from .logging import configure_logging
from .runtime import build_runtime


def cmd_compile(args: argparse.Namespace, rt: Any) -> int:
    """Compile an AST file and print the raw document."""
    nodes = load_ast(Path(args.file), rt.schema)
    document = compile(nodes, rt.options())

    fmt = args.format or rt.config.output.format
    output = dumps(to_raw(document), fmt, indent=rt.config.output.indent)
    if not output.endswith("\n"):
        output += "\n"

    if args.out:
        Path(args.out).write_text(output, encoding="utf-8")
        if not args.quiet:
            print(f"Wrote {len(document.blocks)} blocks to {args.out}")
    else:
        sys.stdout.write(output)
    return 0


def cmd_check(args: argparse.Namespace, rt: Any) -> int:
    """Compile an AST file and report what it contains."""
    nodes = load_ast(Path(args.file), rt.schema)
    document = compile(nodes, rt.options())
    if not args.quiet:
        chars = sum(len(b.text) for b in document.blocks)
        print(
            f"OK: {len(document.blocks)} blocks, {len(document.entities)} entities, "
            f"{chars} characters"
        )
    return 0


def cmd_key(args: argparse.Namespace, rt: Any) -> int:
    """Print a new block key."""
    print(rt.keys.new_key())
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start the HTTP compile server."""
    try:
        import uvicorn

        from .api.app import create_app
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install blockast[api]",
            file=sys.stderr,
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    app = create_app(rt)
    if not args.quiet:
        print(f"Serving on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")
    return 0


def version_string() -> str:
    return (
        f"blockast {__version__} "
        f"(python {platform.python_version()}, platform {platform.system().lower()})"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="blockast", description="Compile block/entity/inline ASTs"
    )
    parser.add_argument(
        "--version", action="version", version=version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: cwd/blockast.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every block and entity"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # compile command
    parser_compile = subparsers.add_parser(
        "compile", help="Compile an AST file (.json, .yaml)"
    )
    parser_compile.add_argument("file", help="AST file")
    parser_compile.add_argument(
        "--format", choices=["json", "yaml"], default=None,
        help="Output format (default: from config, json)"
    )
    parser_compile.add_argument("--out", help="Write output to this path")

    # check command
    parser_check = subparsers.add_parser("check", help="Validate an AST file")
    parser_check.add_argument("file", help="AST file")

    # key command
    subparsers.add_parser("key", help="Print a new block key")

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start HTTP compile server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8766,
        help="Port to bind to (default: 8766)"
    )

    args = parser.parse_args()

    try:
        rt = build_runtime(config_path=args.config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging("DEBUG" if args.verbose else rt.config.logging.level)

    handlers = {
        "compile": cmd_compile,
        "check": cmd_check,
        "key": cmd_key,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
