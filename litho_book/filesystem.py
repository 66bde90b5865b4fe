"""Scanning a documentation directory into a tree of Markdown files."""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import mistune

from .errors import DirectoryScanError, FileNotFoundInTreeError, LithoBookError

log = logging.getLogger(__name__)

_MARKDOWN_SUFFIX = ".md"
_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(seconds: float) -> str | None:
    """Format seconds since the epoch as a UTC ``YYYY-MM-DD HH:MM:SS`` string.

    Returns ``None`` for times before the epoch or out of range.
    """
    if seconds < 0:
        return None
    try:
        moment = datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return moment.strftime(_TIME_FORMAT)


@dataclass
class FileNode:
    """A file or directory in the document tree."""

    name: str
    path: str
    is_file: bool
    children: list[FileNode] = field(default_factory=list)
    size: int | None = None
    modified: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """A JSON-ready dictionary; ``size`` and ``modified`` only when known."""
        data: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "is_file": self.is_file,
            "children": [child.to_dict() for child in self.children],
        }
        if self.size is not None:
            data["size"] = self.size
        if self.modified is not None:
            data["modified"] = self.modified
        return data


@dataclass
class TreeStats:
    """Counts gathered while scanning."""

    total_files: int = 0
    total_dirs: int = 0
    total_size: int = 0


def _is_shown(path: Path) -> bool:
    name = path.name
    if name.startswith("."):
        log.debug("Skipping hidden file/directory: %s", name)
        return False
    if path.is_file() and path.suffix != _MARKDOWN_SUFFIX:
        log.debug("Skipping non-markdown file: %s", name)
        return False
    return True


def _top_level_key(path: Path) -> tuple[bool, str]:
    return (not path.is_dir(), path.name)


def _nested_key(path: Path) -> tuple[bool, str]:
    return (not path.is_dir(), path.name.lower())


class DocumentTree:
    """The Markdown files under a directory, as a tree and a path lookup."""

    def __init__(self, docs_dir: str | Path) -> None:
        self.base = Path(docs_dir)
        self.file_map: dict[str, Path] = {}
        self.stats = TreeStats()

        log.debug("Building document tree from: %s", self.base)
        try:
            children = self._scan_children(self.base, _top_level_key)
        except OSError as exc:
            raise DirectoryScanError(f"{self.base}: {exc}") from exc

        self.root = FileNode(name="root", path="", is_file=False, children=children)
        log.debug(
            "Document tree built: %d files, %d directories, %d bytes total",
            self.stats.total_files,
            self.stats.total_dirs,
            self.stats.total_size,
        )

    def _scan_children(
        self, directory: Path, key: Callable[[Path], tuple[bool, str]]
    ) -> list[FileNode]:
        entries = sorted(directory.iterdir(), key=key)
        children = []
        for entry in entries:
            if not _is_shown(entry):
                continue
            try:
                children.append(self._build(entry))
            except OSError as exc:
                log.warning("Failed to process path %s: %s", entry, exc)
        return children

    def _relative(self, path: Path) -> str:
        try:
            relative = path.relative_to(self.base)
        except ValueError:
            relative = path
        return str(relative).replace("\\", "/")

    def _build(self, path: Path) -> FileNode:
        relative = self._relative(path)

        if path.is_file():
            info = path.stat()
            if path.suffix == _MARKDOWN_SUFFIX:
                self.file_map[relative] = path
                self.stats.total_files += 1
                self.stats.total_size += info.st_size
            return FileNode(
                name=path.name,
                path=relative,
                is_file=True,
                size=info.st_size,
                modified=format_timestamp(info.st_mtime),
            )

        self.stats.total_dirs += 1
        children = self._scan_children(path, _nested_key)
        return FileNode(name=path.name, path=relative, is_file=False, children=children)

    def get_file_content(self, file_path: str) -> str:
        """Read a document by its path relative to the tree root."""
        try:
            path = self.file_map[file_path]
        except KeyError:
            raise FileNotFoundInTreeError(file_path) from None

        log.debug("Reading file: %s", path)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LithoBookError(f"Failed to read file {path}: {exc}") from exc

    def file_metadata(self, file_path: str) -> tuple[int, str | None] | None:
        """Current size and modification time of a document, if it can be read."""
        path = self.file_map.get(file_path)
        if path is None:
            return None
        try:
            info = path.stat()
        except OSError:
            return None
        return info.st_size, format_timestamp(info.st_mtime)

    def render_markdown(self, content: str) -> str:
        """Render Markdown to HTML with tables, footnotes, strikethrough,
        task lists, smart punctuation and heading attributes."""
        markdown = mistune.create_markdown(
            renderer=_Renderer(escape=False),
            plugins=["table", "footnotes", "strikethrough", "task_lists"],
        )
        return markdown(content)

    def search_files(self, query: str) -> list[str]:
        """Paths of documents whose path contains ``query``, ignoring case."""
        needle = query.lower()
        return [
            path
            for path in self.file_map
            if needle in path.lower()
            or any(needle in part.lower() for part in path.split("/"))
        ]


_OPENING_CONTEXT = set(" \t\r\n([{\u2014\u2013")
_QUOTES = re.compile("[\"']")
_HEADING_ATTRS = re.compile(r"\s*\{\s*([^{}]*?)\s*\}\s*$")
_ATTR_QUOTES = "\"'\u201c\u201d\u2018\u2019"


def _curl(match: re.Match[str]) -> str:
    start = match.start()
    previous = match.string[start - 1] if start else ""
    opening = not previous or previous in _OPENING_CONTEXT
    if match.group() == '"':
        return "\u201c" if opening else "\u201d"
    return "\u2018" if opening else "\u2019"


def _smarten(text: str) -> str:
    text = text.replace("...", "\u2026").replace("---", "\u2014").replace("--", "\u2013")
    return _QUOTES.sub(_curl, text)


def _parse_heading_attrs(spec: str) -> dict[str, str]:
    ident = None
    classes = []
    extra: dict[str, str] = {}
    for token in spec.split():
        if token.startswith("#") and len(token) > 1:
            ident = token[1:]
        elif token.startswith(".") and len(token) > 1:
            classes.append(token[1:])
        elif "=" in token:
            key, value = token.split("=", 1)
            if key:
                extra[key] = value.strip(_ATTR_QUOTES)
    attrs: dict[str, str] = {}
    if ident:
        attrs["id"] = ident
    if classes:
        attrs["class"] = " ".join(classes)
    attrs.update(extra)
    return attrs


class _Renderer(mistune.HTMLRenderer):
    def text(self, text: str) -> str:
        return super().text(_smarten(text))

    def heading(self, text: str, level: int, **attrs: Any) -> str:
        merged = {key: str(value) for key, value in attrs.items() if value}
        match = _HEADING_ATTRS.search(text)
        if match:
            text = text[: match.start()]
            merged.update(_parse_heading_attrs(match.group(1)))
        rendered = "".join(
            f' {key}="{html.escape(value, quote=True)}"' for key, value in merged.items()
        )
        return f"<h{level}{rendered}>{text}</h{level}>\n"