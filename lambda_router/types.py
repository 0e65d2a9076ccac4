from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Union

from lambda_router import StatusCode
from lambda_router.routing import RouteEntry


@dataclass(frozen=True)
class Response:
    status_code: StatusCode
    content_type: str
    body: Union[str, bytes]
    headers: Optional[Dict[str, str]] = None


@dataclass
class Request:
    """Request handed to controller actions."""

    method: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    args: Tuple[Optional[str], ...] = ()
    query: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    route: Optional[RouteEntry] = None
    event: Dict = field(default_factory=dict)
    context: Any = None


@dataclass(frozen=True)
class Matched:
    """A route matched: call ``handler`` with the request."""

    entry: RouteEntry
    args: Tuple[Optional[str], ...] = ()
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def target(self) -> Any:
        return self.entry.target

    @property
    def action(self) -> str:
        return self.entry.action

    @property
    def handler(self) -> Callable[..., Any]:
        return self.entry.handler


@dataclass(frozen=True)
class MethodNotAllowed:
    """The path exists, but not for the requested verb."""

    allowed: Tuple[str, ...] = ()

    @property
    def allow_header(self) -> str:
        return ", ".join(self.allowed)


@dataclass(frozen=True)
class Unmatched:
    """No route matched, hand over to the next handler."""


Disposition = Union[Matched, MethodNotAllowed, Unmatched]
