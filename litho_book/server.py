"""WSGI application serving the document tree and its files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from http import HTTPStatus
from socketserver import ThreadingMixIn
from typing import Any, Callable, Iterable, Mapping
from urllib.parse import parse_qs
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer
from wsgiref.simple_server import make_server as _wsgi_make_server

from .errors import LithoBookError
from .filesystem import DocumentTree
from .units import format_bytes

try:
    from . import __version__ as _VERSION
except ImportError:
    _VERSION = "0.1.6"

log = logging.getLogger(__name__)

_INDEX_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Litho Book</title>
<style>
body { margin: 0; display: flex; font-family: sans-serif; height: 100vh; }
nav { width: 280px; overflow: auto; border-right: 1px solid #ddd; padding: 1em; }
main { flex: 1; overflow: auto; padding: 1em 2em; }
nav ul { list-style: none; padding-left: 1em; }
nav a { cursor: pointer; color: #0366d6; }
</style>
</head>
<body>
<nav>
<div class="docs-path">{{ docs_path }}</div>
<ul id="tree"></ul>
</nav>
<main id="content"></main>
<script>
const tree = {{ tree_json|safe }};
function build(node, parent) {
  for (const child of node.children) {
    const item = document.createElement("li");
    if (child.is_file) {
      const link = document.createElement("a");
      link.textContent = child.name;
      link.onclick = () => load(child.path);
      item.appendChild(link);
    } else {
      item.textContent = child.name;
      const list = document.createElement("ul");
      build(child, list);
      item.appendChild(list);
    }
    parent.appendChild(item);
  }
}
async function load(path) {
  const response = await fetch("/api/file?file=" + encodeURIComponent(path));
  if (!response.ok) { return; }
  const data = await response.json();
  document.getElementById("content").innerHTML = data.html;
}
build(tree, document.getElementById("tree"));
</script>
</body>
</html>
"""

_CORS_HEADERS = [
    ("Access-Control-Allow-Origin", "*"),
    ("Access-Control-Allow-Methods", "*"),
    ("Access-Control-Allow-Headers", "*"),
]


@dataclass(frozen=True)
class Response:
    """The outcome of handling one request."""

    status: HTTPStatus
    body: bytes = b""
    content_type: str = "text/plain; charset=utf-8"


def _json_response(data: Any, status: HTTPStatus = HTTPStatus.OK) -> Response:
    body = json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return Response(status, body, "application/json")


def _empty(status: HTTPStatus) -> Response:
    return Response(status)


class LithoBookApp:
    """Routes requests for the index page and the JSON API."""

    def __init__(self, doc_tree: DocumentTree, docs_path: str) -> None:
        self.doc_tree = doc_tree
        self.docs_path = docs_path
        self._routes: dict[str, Callable[[Mapping[str, str]], Response]] = {
            "/": self._index,
            "/api/file": self._file,
            "/api/tree": self._tree,
            "/api/search": self._search,
            "/api/stats": self._stats,
            "/health": self._health,
        }

    def dispatch(self, path: str, query: Mapping[str, str] | None = None) -> Response:
        """Handle a GET request for ``path`` with the given query parameters."""
        handler = self._routes.get(path)
        if handler is None:
            return _empty(HTTPStatus.NOT_FOUND)
        return handler(query or {})

    def __call__(
        self, environ: dict[str, Any], start_response: Callable[..., Any]
    ) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET").upper()
        path = environ.get("PATH_INFO") or "/"

        if method == "OPTIONS":
            response = _empty(HTTPStatus.OK)
        elif path not in self._routes:
            response = _empty(HTTPStatus.NOT_FOUND)
        elif method not in ("GET", "HEAD"):
            response = _empty(HTTPStatus.METHOD_NOT_ALLOWED)
        else:
            parsed = parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True)
            query = {key: values[0] for key, values in parsed.items()}
            response = self.dispatch(path, query)

        headers = [
            ("Content-Type", response.content_type),
            ("Content-Length", str(len(response.body))),
            *_CORS_HEADERS,
        ]
        if response.status is HTTPStatus.METHOD_NOT_ALLOWED:
            headers.append(("Allow", "GET,HEAD"))
        start_response(f"{response.status.value} {response.status.phrase}", headers)
        return [b"" if method == "HEAD" else response.body]

    def _index(self, query: Mapping[str, str]) -> Response:
        log.debug("Serving index page")
        tree_json = json.dumps(
            self.doc_tree.root.to_dict(), ensure_ascii=False, separators=(",", ":")
        )
        page = _INDEX_TEMPLATE.replace("{{ tree_json|safe }}", tree_json).replace(
            "{{ docs_path }}", self.docs_path
        )
        return Response(HTTPStatus.OK, page.encode("utf-8"), "text/html; charset=utf-8")

    def _file(self, query: Mapping[str, str]) -> Response:
        file_path = query.get("file")
        if file_path is None:
            log.debug("Missing file parameter in request")
            return _empty(HTTPStatus.BAD_REQUEST)

        log.debug("Requesting file: %s", file_path)
        try:
            content = self.doc_tree.get_file_content(file_path)
        except LithoBookError as exc:
            log.error("Failed to read file %s: %s", file_path, exc)
            return _empty(HTTPStatus.NOT_FOUND)

        rendered = self.doc_tree.render_markdown(content)
        metadata = self.doc_tree.file_metadata(file_path)
        size, modified = metadata if metadata is not None else (None, None)

        log.info("Successfully served file: %s", file_path)
        return _json_response(
            {
                "content": content,
                "html": rendered,
                "path": file_path,
                "size": size,
                "modified": modified,
            }
        )

    def _tree(self, query: Mapping[str, str]) -> Response:
        log.debug("Serving document tree")
        return _json_response(self.doc_tree.root.to_dict())

    def _search(self, query: Mapping[str, str]) -> Response:
        needle = query.get("q", "")
        if not needle:
            return _json_response({"files": [], "total": 0})

        log.debug("Searching for: %s", needle)
        files = self.doc_tree.search_files(needle)
        log.debug("Found %d files matching query: %s", len(files), needle)
        return _json_response({"files": files, "total": len(files)})

    def _stats(self, query: Mapping[str, str]) -> Response:
        stats = self.doc_tree.stats
        return _json_response(
            {
                "total_files": stats.total_files,
                "total_dirs": stats.total_dirs,
                "total_size": stats.total_size,
                "formatted_size": format_bytes(stats.total_size),
            }
        )

    def _health(self, query: Mapping[str, str]) -> Response:
        return _json_response(
            {
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "version": _VERSION,
            }
        )


def create_app(doc_tree: DocumentTree, docs_path: str) -> LithoBookApp:
    """Build the WSGI application for a scanned document tree."""
    return LithoBookApp(doc_tree, docs_path)


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        log.debug("%s - %s", self.address_string(), format % args)


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


def make_server(app: LithoBookApp, host: str, port: int) -> WSGIServer:
    """Bind a threaded WSGI server for ``app``; raises ``OSError`` if binding fails."""
    return _wsgi_make_server(
        host, port, app, server_class=_ThreadingWSGIServer, handler_class=_QuietHandler
    )