"""Verb scoped route table, dispatcher and reverse routing."""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import unquote

from lambda_router import HTTP_METHODS
from lambda_router.config import RouterConfig
from lambda_router.errors import ActionNotFoundError, InvalidVerbError
from lambda_router.reverse import RouteArguments, url_for
from lambda_router.routing import CompiledPattern, PathSpec, RouteEntry, compile_path
from lambda_router.types import Disposition, Matched, MethodNotAllowed, Unmatched

log = logging.getLogger(__name__)

METHOD_NOT_ALLOWED = "method_not_allowed"


def _resolve_action(target: Any, action: str) -> Any:
    handler = getattr(target, action, None)
    if not callable(handler):
        raise ActionNotFoundError(f"{target!r} has no action {action!r}")
    return handler


def _strip_query(path: str) -> str:
    return re.split(r"[?#]", path, maxsplit=1)[0]


class Router:
    """Route ``(verb, path)`` pairs to ``controller.action``.

    Usage::

        router = Router()
        router.route("/users/:id", users, "show", "GET")
        router.resources("/posts", posts)
        router.dispatch("GET", "/users/42")
        router.url_for(users, "show", NamedArguments({"id": 42}))

    Registering a path for one verb answers every other verb with a
    ``MethodNotAllowed`` fallback, and a GET route also serves HEAD.
    """

    def __init__(self, config: Optional[RouterConfig] = None, **options) -> None:
        """Initialize the router and an empty route table."""
        self.config: RouterConfig = (config or RouterConfig()).replace(**options)
        self.routes: Dict[str, Dict[str, RouteEntry]] = {}
        self.reset()

    def reset(self) -> None:
        """Flush every registered route."""
        self.routes = {verb: {} for verb in HTTP_METHODS}

    def configure(self, **options) -> "Router":
        """Apply new options and flush the route table."""
        self.config = self.config.replace(**options)
        self.reset()
        return self

    def compile(self, path: PathSpec) -> CompiledPattern:
        """Compile ``path`` with the router's matching options."""
        return compile_path(
            path,
            case_sensitive=self.config.case_sensitive,
            strict=self.config.strict_slashes,
        )

    def route(
        self,
        path: PathSpec,
        target: Any,
        action: Optional[str] = None,
        verb: Optional[str] = None,
    ) -> "Router":
        """Bind ``path`` to ``target.action`` for ``verb``.

        ``action`` defaults to ``show`` and ``verb`` to ``GET``. Other verbs on
        the same path get a fallback entry unless they already have one.
        Returns the router so calls can be chained.
        """
        action = action or "show"
        verb = (verb or "GET").upper()
        if verb not in HTTP_METHODS:
            raise InvalidVerbError(f"Invalid HTTP method: {verb}")

        handler = _resolve_action(target, action)
        pattern = self.compile(path)
        source = pattern.source

        for method in HTTP_METHODS:
            entries = self.routes[method]
            if method == verb:
                entries[source] = RouteEntry(pattern, method, target, action, handler)
            elif source not in entries:
                entries[source] = RouteEntry(
                    pattern,
                    method,
                    self.config,
                    METHOD_NOT_ALLOWED,
                    self.config.method_not_allowed,
                    fallback=True,
                )

        if verb == "GET":
            head = self.routes["HEAD"][source]
            if head.fallback:
                self.routes["HEAD"][source] = RouteEntry(
                    pattern, "HEAD", target, action, handler, implicit=True
                )

        log.debug("Route %s %s -> %r.%s", verb, source, target, action)
        return self

    def _bind_resource(
        self, controller: Any, rows: Sequence[Tuple[str, str, str]]
    ) -> "Router":
        for key, verb, path in rows:
            action = self.config.resource_actions[key]
            if callable(getattr(controller, action, None)):
                self.route(path, controller, action, verb)
        return self

    def resources(self, path: str, controller: Any, ident: str = ":id") -> "Router":
        """Bind the collection routes ``controller`` implements.

        ====== ================ =======
        Verb   Path             Action
        ====== ================ =======
        GET    /path            list
        POST   /path            create
        GET    /path/new        new
        GET    /path/:id        show
        PUT    /path/:id        update
        PATCH  /path/:id        update
        DELETE /path/:id        destroy
        GET    /path/:id/edit   edit
        ====== ================ =======
        """
        item = f"{path}/{ident}"
        return self._bind_resource(
            controller,
            (
                ("list", "GET", path),
                ("create", "POST", path),
                ("new", "GET", f"{path}/new"),
                ("show", "GET", item),
                ("update", "PUT", item),
                ("update", "PATCH", item),
                ("destroy", "DELETE", item),
                ("edit", "GET", f"{item}/edit"),
            ),
        )

    def resource(self, path: str, controller: Any, ident: str = ":id") -> "Router":
        """Bind the singular resource routes ``controller`` implements.

        show, create, update (PUT and PATCH) and destroy live on ``path``,
        new and edit on ``path/new`` and ``path/edit``. ``ident`` is accepted
        for symmetry with ``resources`` and not used, a singular resource has
        no item segment.
        """
        return self._bind_resource(
            controller,
            (
                ("show", "GET", path),
                ("create", "POST", path),
                ("update", "PUT", path),
                ("update", "PATCH", path),
                ("destroy", "DELETE", path),
                ("new", "GET", f"{path}/new"),
                ("edit", "GET", f"{path}/edit"),
            ),
        )

    def dispatch(self, verb: str, path: str) -> Disposition:
        """Match ``verb`` and ``path`` against the route table.

        Routes are tried in registration order and the first match wins.
        """
        path = _strip_query(path)
        for entry in self.routes.get(verb.upper(), {}).values():
            match = entry.pattern.matcher.search(path)
            if not match:
                continue

            if entry.fallback:
                allowed = tuple(self.allowed_methods(entry))
                log.debug("%s %s not allowed (%s)", verb, path, ", ".join(allowed))
                return MethodNotAllowed(allowed)

            args = tuple(
                None if value is None else unquote(value) for value in match.groups()
            )
            params = {
                param.name: value
                for param, value in zip(entry.pattern.params, args)
                if param.name and value is not None
            }
            return Matched(entry, args, params)

        return Unmatched()

    def _source(self, path: Any) -> Optional[str]:
        if isinstance(path, re.Pattern):
            return path.pattern
        if isinstance(path, CompiledPattern):
            return path.source
        if isinstance(path, RouteEntry):
            return path.pattern.source
        if isinstance(path, Matched):
            return path.entry.pattern.source
        if hasattr(path, "route"):
            route = path.route
            return route.pattern.source if route is not None else None
        return self.compile(path).source

    def allowed_methods(self, path: Any) -> List[str]:
        """Return the verbs explicitly registered for ``path``.

        A HEAD entry derived from a GET route is not listed, although it
        dispatches to the GET action.

        ``path`` may be a path spec, a compiled regex, a route entry, a
        ``Matched`` result or a request carrying its matched ``route``.
        """
        source = self._source(path)
        allowed = []
        for verb in HTTP_METHODS:
            entry = self.routes[verb].get(source)
            if entry is not None and not (entry.fallback or entry.implicit):
                allowed.append(verb)
        return allowed

    def url_for(
        self, target: Any, action: str, arguments: Optional[RouteArguments] = None
    ) -> str:
        """Build the URL routed to ``target.action``."""
        return url_for(self.routes, target, action, arguments)
