"""Command-line front end for the Kudu VFS client."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from kudu_vfs import __version__
from kudu_vfs.api.client import KuduClient, kudu_client_from_config
from kudu_vfs.api.dispatcher import KuduTransportError
from kudu_vfs.config import load_config
from kudu_vfs.vfs.paths import InvalidPathError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
VERBOSE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbosity: int = 0) -> None:
    """Send package logs to stderr.

    Args:
        verbosity: 0=WARNING, 1=DEBUG, 2+=DEBUG with logger names.
    """
    if verbosity >= 2:
        level, fmt = logging.DEBUG, VERBOSE_LOG_FORMAT
    elif verbosity == 1:
        level, fmt = logging.DEBUG, LOG_FORMAT
    else:
        level, fmt = logging.WARNING, LOG_FORMAT

    package_logger = logging.getLogger("kudu_vfs")
    package_logger.handlers = []
    package_logger.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kudu-vfs", description="Browse and edit the files of an App Service site"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for DEBUG, -vv to include logger names)",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    sub.add_parser("env", help="Show the Kudu environment of the site")

    exec_parser = sub.add_parser("exec", help="Run a command on the remote host")
    exec_parser.add_argument("remote_command", help="Command line to run")
    exec_parser.add_argument("--dir", help="Remote working directory (e.g. D:\\home\\site)")

    get_parser = sub.add_parser("get", help="Download a file")
    get_parser.add_argument("path", help="Remote file path")
    get_parser.add_argument("-o", "--output", help="Local file to write (default: stdout)")

    put_parser = sub.add_parser("put", help="Upload a file")
    put_parser.add_argument("local", help="Local file to upload")
    put_parser.add_argument("path", help="Remote file path")

    rm_parser = sub.add_parser("rm", help="Delete a file")
    rm_parser.add_argument("path", help="Remote file path")

    ls_parser = sub.add_parser("ls", help="List a folder")
    ls_parser.add_argument("path", nargs="?", default="", help="Remote folder path")
    ls_parser.add_argument("--json", action="store_true", help="Output in JSON format")

    mkdir_parser = sub.add_parser("mkdir", help="Create a folder")
    mkdir_parser.add_argument("path", help="Remote folder path")

    rmdir_parser = sub.add_parser("rmdir", help="Delete an empty folder")
    rmdir_parser.add_argument("path", help="Remote folder path")

    zip_parser = sub.add_parser("zip", help="Download a folder as a zip archive")
    zip_parser.add_argument("path", help="Remote folder path")
    zip_parser.add_argument("output", help="Local zip file to write")

    unzip_parser = sub.add_parser("unzip", help="Upload a zip archive and extract it")
    unzip_parser.add_argument("local", help="Local zip file")
    unzip_parser.add_argument("path", help="Remote folder to extract into")

    return parser


def run(client: KuduClient, args: argparse.Namespace) -> int:
    """Execute a parsed command against ``client`` and return the exit code."""
    if args.command == "env":
        print(json.dumps(client.get_environment(), indent=2))
    elif args.command == "exec":
        result = client.run_command(args.remote_command, args.dir)
        if result.output:
            sys.stdout.write(result.output)
        if result.error:
            sys.stderr.write(result.error)
        return result.exit_code
    elif args.command == "get":
        if args.output:
            client.download_file(args.path, args.output)
        else:
            sys.stdout.buffer.write(client.download_file(args.path) or b"")
    elif args.command == "put":
        client.upload_file(args.path, args.local)
    elif args.command == "rm":
        client.delete_file(args.path)
    elif args.command == "ls":
        entries = client.list_folder(args.path)
        if args.json:
            print(json.dumps([asdict(e) for e in entries], indent=2))
        else:
            for entry in entries:
                suffix = "/" if entry.is_folder else ""
                print(f"{entry.size:>12}  {entry.mtime:<28}  {entry.name}{suffix}")
    elif args.command == "mkdir":
        client.create_folder(args.path)
    elif args.command == "rmdir":
        client.delete_folder(args.path)
    elif args.command == "zip":
        client.download_zip(args.path, args.output)
    elif args.command == "unzip":
        client.upload_zip(args.path, args.local)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits on --help, --version and usage errors
        return e.code if isinstance(e.code, int) else 1

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config()
    except KeyError as exc:
        print(f"Error: missing environment variable {exc}", file=sys.stderr)
        return 1

    client = kudu_client_from_config(config)
    try:
        return run(client, args)
    except (InvalidPathError, KuduTransportError, OSError) as exc:
        logger.debug("[main] command failed; command:%s", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
