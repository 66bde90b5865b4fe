"""Error types raised by the documentation reader."""

from __future__ import annotations

from http import HTTPStatus


class LithoBookError(Exception):
    """Base class for every error the reader raises on purpose."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def status_code(self) -> HTTPStatus:
        """The HTTP status that best describes this error."""
        return self.status


class FileNotFoundInTreeError(LithoBookError):
    """A requested document is not part of the scanned tree."""

    status = HTTPStatus.NOT_FOUND

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class InvalidPathError(LithoBookError):
    """A requested path is malformed."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(self, path: str) -> None:
        super().__init__(f"Invalid file path: {path}")
        self.path = path


class DirectoryScanError(LithoBookError):
    """The documentation directory could not be scanned."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Directory scan error: {detail}")
        self.detail = detail


class ServerError(LithoBookError):
    """The web server failed."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Server error: {detail}")
        self.detail = detail


class ConfigError(LithoBookError):
    """The configuration or command line is invalid."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(f"Configuration error: {detail}")
        self.detail = detail