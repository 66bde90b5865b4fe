# litho-book

A small web reader for Markdown documentation trees, such as those produced by
the Litho documentation generator. Point it at a directory and browse the
documents in a web browser: a navigation tree, rendered Markdown, file search
and basic statistics. It runs on Python's built-in threaded WSGI server.

## Installation

```
pip install .
```

## Usage

```
litho-book --docs-dir ./docs
```

Options:

| Option | Default | Meaning |
| --- | --- | --- |
| `-d`, `--docs-dir DIR` | (required) | Directory holding the Markdown files |
| `-p`, `--port PORT` | `3000` | Port to serve on (0–65535) |
| `--host HOST` | `127.0.0.1` | Address to bind to |
| `-o`, `--open` | off | Open a browser once the server is bound |
| `-v`, `--verbose` | off | Log at DEBUG level instead of INFO |
| `-V`, `--version` | | Print the version and exit |

The command exits with status 1 if the directory does not exist or is not a
directory, if the port is below 1024 and the process is not privileged (root on
Unix; always allowed on Windows), if the directory cannot be scanned, or if the
address cannot be bound. Stop the server with Ctrl+C.

With `--open`, the browser is started with `open` on macOS, `cmd /c start` on
Windows, and the first of `xdg-open`, `firefox`, `chromium`, `google-chrome`
that starts on Linux. If none starts, a warning is logged and the server keeps
running.

## What is shown

Only files ending in `.md` are listed, and hidden files and directories (names
starting with `.`) are skipped. In each directory, subdirectories come before
files; the top level is sorted by name, deeper levels by name ignoring case.
Paths are relative to the documentation directory and use `/` as separator.

Markdown is rendered with tables, footnotes, strikethrough, task lists, smart
punctuation (curly quotes, dashes, ellipses) and heading attributes such as
`## Title {#id .class key=value}`.

## HTTP endpoints

All endpoints answer `GET` and `HEAD`, reply to `OPTIONS` with 200, and send
permissive CORS headers. Unknown paths give 404, other methods 405.

- `GET /` – the reader page, with the tree embedded
- `GET /api/tree` – the document tree as JSON (`name`, `path`, `is_file`,
  `children`, and `size` and `modified` for files)
- `GET /api/file?file=<relative path>` – JSON with `content`, `html`, `path`,
  `size` and `modified` (UTC, `YYYY-MM-DD HH:MM:SS`); 400 without `file`,
  404 if the file is not in the tree or cannot be read
- `GET /api/search?q=<text>` – JSON with `files` and `total`: paths containing
  the text, ignoring case; an empty query matches nothing
- `GET /api/stats` – JSON with `total_files`, `total_dirs`, `total_size` and
  `formatted_size` (such as `1.5 KB`)
- `GET /health` – JSON with `status`, `timestamp` and `version`

The tree is scanned once at start-up; files added or removed later are not
picked up until the server is restarted.

## Using it from Python

```python
from litho_book.filesystem import DocumentTree
from litho_book.server import create_app, make_server
from litho_book.units import format_bytes

tree = DocumentTree("docs")
print(tree.stats.total_files, format_bytes(tree.stats.total_size))
print(tree.search_files("architecture"))
print(tree.render_markdown(tree.get_file_content("README.md")))

app = create_app(tree, "docs")
response = app.dispatch("/api/search", {"q": "guide"})
print(response.status, response.body)

with make_server(app, "127.0.0.1", 3000) as httpd:
    httpd.serve_forever()
```

`DocumentTree` raises `DirectoryScanError` if the directory cannot be read, and
`get_file_content` raises `FileNotFoundInTreeError` for a path not in the tree.
All errors derive from `litho_book.errors.LithoBookError`, whose
`status_code()` gives the matching HTTP status.

## Running the tests

```
pip install ".[test]"
pytest
```