"""Translate API Gateway proxy events into controller calls."""

import base64
import json
import logging
import sys
from typing import Any, Callable, Dict, Optional, Sequence

from lambda_router import StatusCode
from lambda_router.gateway import ApigwPath
from lambda_router.reverse import RouteArguments
from lambda_router.router import Router
from lambda_router.routing import PathSpec
from lambda_router.types import Matched, MethodNotAllowed, Request, Response

BINARY_TYPES = [
    "application/octet-stream",
    "application/x-protobuf",
    "application/x-tar",
    "application/zip",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/tiff",
    "image/webp",
    "image/jp2",
]


def _error(status_code: StatusCode, message: str, **headers: str) -> Response:
    return Response(
        status_code=status_code,
        content_type="application/json",
        body=json.dumps({"errorMessage": message}),
        headers=headers or None,
    )


def _get_body(event: Dict) -> Optional[str]:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode()
    return body


class API:
    """Lambda handler routing API Gateway events through a ``Router``.

    Controller actions receive a ``Request`` and return a ``Response``.
    Requests no route matches are handed to ``next_handler`` when given,
    otherwise answered with a 404.
    """

    FORMAT_STRING = "[%(name)s] - [%(levelname)s] - %(message)s"

    def __init__(
        self,
        name: str,
        router: Optional[Router] = None,
        debug: bool = False,
        configure_logs: bool = True,
        https: bool = True,
        next_handler: Optional[Callable[[Request], Response]] = None,
        **options,
    ) -> None:
        """Initialize API object.

        Extra ``options`` (``case_sensitive``, ``strict_slashes``,
        ``method_not_allowed``, ``resource_actions``) configure the router
        created when none is given.
        """
        if router is not None and options:
            raise TypeError(
                f"API() got router options with an explicit router: "
                f"{', '.join(options)}"
            )
        self.name: str = name
        self.router: Router = router or Router(**options)
        self.debug: bool = debug
        self.https: bool = https
        self.next_handler = next_handler
        self.event: Dict = {}
        self.context: Any = None
        self.request_path: Optional[ApigwPath] = None
        self.log = logging.getLogger(self.name)
        if configure_logs:
            self._configure_logging()

    @property
    def host(self) -> str:
        """Construct api gateway endpoint url."""
        headers = self.event.get("headers") or {}
        host = headers.get("x-forwarded-host", headers.get("host", ""))
        path_info = self.request_path
        if path_info.apigw_stage and path_info.apigw_stage != "$default":
            host_suffix = f"/{path_info.apigw_stage}"
        else:
            host_suffix = path_info.path_mapping

        scheme = "https" if self.https else "http"
        return f"{scheme}://{host}{host_suffix}"

    def _configure_logging(self) -> None:
        if self._already_configured(self.log):
            return

        handler = logging.StreamHandler(sys.stdout)
        # Lambda adds its own timestamp.
        handler.setFormatter(logging.Formatter(self.FORMAT_STRING))
        self.log.propagate = False
        self.log.setLevel(logging.DEBUG if self.debug else logging.ERROR)
        self.log.addHandler(handler)

    def _already_configured(self, log: logging.Logger) -> bool:
        for handler in log.handlers:
            if isinstance(handler, logging.StreamHandler):
                if handler.stream == sys.stdout:
                    return True

        return False

    def route(
        self,
        path: PathSpec,
        target: Any,
        action: Optional[str] = None,
        verb: Optional[str] = None,
    ) -> "API":
        """Register ``target.action`` for ``verb`` on ``path``."""
        self.router.route(path, target, action, verb)
        return self

    def resources(self, path: str, controller: Any, ident: str = ":id") -> "API":
        """Register the collection routes of ``controller``."""
        self.router.resources(path, controller, ident)
        return self

    def resource(self, path: str, controller: Any, ident: str = ":id") -> "API":
        """Register the singular resource routes of ``controller``."""
        self.router.resource(path, controller, ident)
        return self

    def url_for(
        self, target: Any, action: str, arguments: Optional[RouteArguments] = None
    ) -> str:
        """Build the URL of ``target.action``.

        While a request is handled the URL carries the API Gateway stage or
        base path mapping prefix.
        """
        url = self.router.url_for(target, action, arguments)
        if url and self.request_path is not None:
            return self.request_path.prefix + url
        return url

    def method_not_allowed(
        self, request: Request, allowed: Sequence[str]
    ) -> Response:
        """Default answer for a known path requested with another verb."""
        return _error(
            StatusCode.METHOD_NOT_ALLOWED,
            f"Method {request.method} not defined on route",
        )

    def not_found(self, request: Request) -> Response:
        """Default answer when no route matches."""
        return _error(
            StatusCode.NOT_FOUND,
            f"No view function for: {request.method} - {request.path}",
        )

    def response(self, response: Response, head: bool = False) -> Dict[str, Any]:
        """Return HTTP response.

        including response code (status), headers and body

        """
        headers = dict(response.headers or {})
        headers["Content-Type"] = response.content_type
        status_code = getattr(response.status_code, "value", response.status_code)

        message_data: Dict[str, Any] = {"headers": headers, "statusCode": status_code}
        body = "" if head else response.body
        if response.content_type in BINARY_TYPES or not isinstance(body, str):
            if isinstance(body, str):
                body = body.encode()
            message_data["isBase64Encoded"] = True
            message_data["body"] = base64.b64encode(body).decode()
        else:
            message_data["body"] = body

        return message_data

    def _call(self, request: Request, handler: Callable, *args: Any) -> Response:
        try:
            return handler(request, *args)
        except Exception as err:
            self.log.error(str(err))
            return _error(StatusCode.INTERNAL_SERVER_ERROR, str(err))

    def __call__(self, event: Dict, context: Any) -> Dict[str, Any]:
        """Route the event and return the proxy response."""
        self.log.debug(json.dumps(event, default=str))

        self.event = event
        self.context = context

        # Header names are case insensitive, API Gateway passes them as sent.
        headers = self.event.get("headers") or {}
        self.event["headers"] = {key.lower(): value for key, value in headers.items()}

        self.request_path = ApigwPath(self.event)
        if self.request_path.path is None:
            return self.response(
                _error(StatusCode.BAD_REQUEST, "Missing or invalid path")
            )

        request = Request(
            method=self.request_path.method,
            path=self.request_path.path,
            query=event.get("queryStringParameters") or {},
            headers=self.event["headers"],
            body=_get_body(event),
            event=event,
            context=context,
        )
        head = request.method == "HEAD"

        disposition = self.router.dispatch(request.method, request.path)
        if isinstance(disposition, Matched):
            request.route = disposition.entry
            request.params = dict(disposition.params)
            request.args = disposition.args
            return self.response(self._call(request, disposition.handler), head)

        if isinstance(disposition, MethodNotAllowed):
            self.log.debug("405 for %s - %s", request.method, request.path)
            handler = self.router.config.method_not_allowed or self.method_not_allowed
            response = self._call(request, handler, disposition.allowed)
            headers = dict(response.headers or {})
            headers.setdefault("Allow", disposition.allow_header)
            return self.response(
                Response(
                    response.status_code, response.content_type, response.body, headers
                ),
                head,
            )

        handler = self.next_handler or self.not_found
        return self.response(self._call(request, handler), head)
