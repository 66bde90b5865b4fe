"""Command line entry point: scan a directory and serve it on the web."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError, LithoBookError
from .filesystem import DocumentTree
from .server import create_app, make_server
from .units import format_bytes

try:
    from . import __version__ as _VERSION
except ImportError:
    _VERSION = "0.1.6"

log = logging.getLogger("litho_book")

_LINUX_BROWSERS = ("xdg-open", "firefox", "chromium", "google-chrome")


@dataclass
class Args:
    """Options the reader is started with."""

    docs_dir: Path
    port: int = 3000
    host: str = "127.0.0.1"
    open: bool = False
    verbose: bool = False

    def validate(self) -> None:
        """Raise ``ConfigError`` if the options cannot be used."""
        if not self.docs_dir.exists():
            raise ConfigError(f"Documentation directory does not exist: {self.docs_dir}")
        if not self.docs_dir.is_dir():
            raise ConfigError(f"Path is not a directory: {self.docs_dir}")
        if self.port < 1024 and not is_privileged():
            raise ConfigError(
                f"Port {self.port} requires administrator privileges. "
                "Please use a port >= 1024 or run as administrator."
            )

    def server_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def bind_address(self) -> str:
        return f"{self.host}:{self.port}"


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {text}") from None
    if not 0 <= value <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {text}")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="litho-book",
        description="A web-based reader for litho-generated documentation",
    )
    parser.add_argument(
        "-d", "--docs-dir", required=True, type=Path, metavar="DIR",
        help="Path to the markdown documentation directory",
    )
    parser.add_argument(
        "-p", "--port", type=_port, default=3000, metavar="PORT",
        help="Port to serve the web interface on",
    )
    parser.add_argument(
        "--host", default="127.0.0.1", metavar="HOST",
        help="Host to bind the server to",
    )
    parser.add_argument(
        "-o", "--open", action="store_true",
        help="Open browser automatically after starting the server",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument("-V", "--version", action="version", version=f"litho-book {_VERSION}")
    return parser


def parse_args(argv: list[str] | None = None) -> Args:
    """Parse command line arguments; exits with usage on invalid input."""
    namespace = _parser().parse_args(argv)
    return Args(
        docs_dir=namespace.docs_dir,
        port=namespace.port,
        host=namespace.host,
        open=namespace.open,
        verbose=namespace.verbose,
    )


def is_privileged() -> bool:
    """Whether the process may bind to ports below 1024."""
    if sys.platform == "win32":
        return True
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    return geteuid() == 0


def open_browser(url: str) -> None:
    """Open ``url`` in a web browser; raises ``LithoBookError`` if none starts."""
    if sys.platform == "win32":
        commands = [["cmd", "/c", "start", "", url]]
    elif sys.platform == "darwin":
        commands = [["open", url]]
    elif sys.platform.startswith("linux"):
        commands = [[browser, url] for browser in _LINUX_BROWSERS]
    else:
        raise LithoBookError("Automatic browser opening not supported on this platform")

    last_error: OSError | None = None
    for command in commands:
        try:
            subprocess.Popen(command)
        except OSError as exc:
            last_error = exc
            continue
        return
    if sys.platform.startswith("linux"):
        raise LithoBookError("No suitable browser found")
    raise LithoBookError(f"Failed to start browser: {last_error}")


def init_logging(verbose: bool) -> None:
    """Log to stderr at DEBUG when verbose, INFO otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        force=True,
    )


def print_banner() -> None:
    print()
    print("📚 Litho Book - Documentation Reader")
    print(f"   Version: {_VERSION}")
    print("   A web-based reader for litho-generated documentation")
    print()


def main(argv: list[str] | None = None) -> int:
    """Run the reader; returns the process exit status."""
    args = parse_args(argv)
    init_logging(args.verbose)
    print_banner()

    try:
        args.validate()
    except ConfigError as exc:
        log.error("Argument validation failed: %s", exc)
        return 1

    log.info("Scanning documentation directory: %s", args.docs_dir)
    try:
        tree = DocumentTree(args.docs_dir)
    except (LithoBookError, OSError) as exc:
        log.error("Failed to scan documentation directory: %s", exc)
        return 1

    stats = tree.stats
    log.info(
        "Scanned documentation directory: %d files, %d directories, total size: %s",
        stats.total_files,
        stats.total_dirs,
        format_bytes(stats.total_size),
    )
    if stats.total_files == 0:
        log.warning("No Markdown files found; check that the directory contains .md files")

    docs_path = str(args.docs_dir).replace("\\", "/")
    app = create_app(tree, docs_path)

    bind_address = args.bind_address()
    try:
        server = make_server(app, args.host, args.port)
    except OSError as exc:
        log.error("Cannot bind to address %s: %s", bind_address, exc)
        return 1
    log.info("Server bound: %s", bind_address)

    server_url = args.server_url()
    log.info("🚀 Litho Book server started!")
    log.info("📖 Address: %s", server_url)
    log.info("📁 Documentation directory: %s", args.docs_dir)
    log.info("⏹️  Press Ctrl+C to stop the server")

    if args.open:
        log.info("Opening browser...")
        try:
            open_browser(server_url)
        except LithoBookError as exc:
            log.warning("Could not open browser automatically: %s", exc)
            log.info("Please visit: %s", server_url)

    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            log.info("Server stopped")
        except Exception as exc:
            log.error("Server error: %s", exc)
            return 1
    return 0