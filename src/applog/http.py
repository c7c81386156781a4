"""Read-only views of inbound HTTP requests.

This module defines the request interface the facade's request logging
reads from, with implementations for parsed requests and WSGI environs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union
from urllib.parse import parse_qs, urlsplit

Headers = Mapping[str, Union[str, Sequence[str]]]


class RequestContext(Protocol):
    """Read-only view of an inbound HTTP request."""

    def method(self) -> str: ...

    def uri(self) -> str: ...

    def header(self, name: str) -> Optional[str]: ...

    def parameter(self, name: str) -> Optional[str]: ...

    def all_parameters(self) -> Dict[str, Any]: ...

    def all_headers(self) -> Dict[str, Any]: ...


@dataclass
class HttpRequestView:
    """Parsed HTTP request.

    Attributes:
        request_method: HTTP method (GET, POST, etc.).
        path: Request path without query string.
        headers: Header name to values, in received capitalisation.
        params: Parameter name to values, in received order.
    """

    request_method: str
    path: str
    headers: Dict[str, List[str]] = field(default_factory=dict)
    params: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_url(
        cls, method: str, url: str, headers: Optional[Headers] = None
    ) -> "HttpRequestView":
        """Create a view from a request URL and headers.

        Example:
            >>> view = HttpRequestView.from_url("GET", "/courses?id=CS101")
            >>> view.parameter("id")
            'CS101'
        """
        parts = urlsplit(url)
        return cls(
            request_method=method.upper(),
            path=parts.path or "/",
            headers=_normalize_headers(headers or {}),
            params=parse_qs(parts.query, keep_blank_values=True),
        )

    def method(self) -> str:
        return self.request_method

    def uri(self) -> str:
        return self.path

    def header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for key, values in self.headers.items():
            if key.lower() == wanted and values:
                return values[0]
        return None

    def parameter(self, name: str) -> Optional[str]:
        values = self.params.get(name)
        return values[0] if values else None

    def all_parameters(self) -> Dict[str, Any]:
        """Parameters flattened to a value, or a list when repeated."""
        return {
            name: values[0] if len(values) == 1 else list(values)
            for name, values in self.params.items()
        }

    def all_headers(self) -> Dict[str, Any]:
        """Headers with repeated values joined by commas."""
        return {name: ", ".join(values) for name, values in self.headers.items()}


class WsgiRequestView(HttpRequestView):
    """Request view built from a WSGI environ."""

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "WsgiRequestView":
        headers: Dict[str, List[str]] = {}
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                name = key[5:]
            elif key in ("CONTENT_TYPE", "CONTENT_LENGTH") and value:
                name = key
            else:
                continue
            headers[name.replace("_", "-").title()] = [str(value)]

        return cls(
            request_method=str(environ.get("REQUEST_METHOD", "GET")).upper(),
            path=str(environ.get("SCRIPT_NAME", "")) + str(environ.get("PATH_INFO", "")) or "/",
            headers=headers,
            params=parse_qs(str(environ.get("QUERY_STRING", "")), keep_blank_values=True),
        )


def _normalize_headers(headers: Headers) -> Dict[str, List[str]]:
    normalized: Dict[str, List[str]] = {}
    for name, value in headers.items():
        if isinstance(value, str):
            normalized[name] = [value]
        else:
            normalized[name] = [str(v) for v in value]
    return normalized
