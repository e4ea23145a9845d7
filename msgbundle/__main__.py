"""Command line entry point: ``python -m msgbundle {list,flatten,serve}``."""

import argparse
import asyncio
import logging
import sys

from msgbundle.core.dependencies import get_flattener, get_registry
from msgbundle.domain.errors import MessageBundleError


def _cmd_list(args: argparse.Namespace) -> int:
    registry = get_registry()
    registry.find_message_files()
    for name, location in sorted(registry.locations.items()):
        print(f"{name}\t{location}")
    return 0


def _cmd_flatten(args: argparse.Namespace) -> int:
    flattener = get_flattener()
    flattener.registry.find_message_files()
    report = asyncio.run(flattener.flatten(args.output_dir))
    print(f"Bundled {len(report.packages)} packages ({len(report.files)} files) into {report.output_dir}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("msgbundle.main:app", host=args.host, port=args.port)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="msgbundle", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List discovered message packages.").set_defaults(func=_cmd_list)

    flatten_parser = sub.add_parser("flatten", help="Bundle every package into one directory.")
    flatten_parser.add_argument("output_dir")
    flatten_parser.set_defaults(func=_cmd_flatten)

    serve_parser = sub.add_parser("serve", help="Run the HTTP inspection API.")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=_cmd_serve)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    try:
        return args.func(args)
    except MessageBundleError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
