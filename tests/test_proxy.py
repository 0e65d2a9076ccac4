"""Test the Lambda handler."""

import base64
import json
import logging
import sys
from unittest.mock import Mock

import pytest

from lambda_router import API, NamedArguments, StatusCode
from lambda_router.router import Router
from lambda_router.types import Request, Response


@pytest.fixture
def app():
    """API without log handlers."""
    api = API(name="test", configure_logs=False)
    yield api
    for handler in list(api.log.handlers):
        api.log.removeHandler(handler)


def ok(body="ok", content_type="text/plain"):
    return Response(StatusCode.OK, content_type, body)


def test_API_init():
    """Should work as expected."""
    app = API(name="test")
    assert app.name == "test"
    assert isinstance(app.router, Router)
    assert not app.debug
    assert app.log.getEffectiveLevel() == 40  # ERROR

    for h in app.log.handlers:
        app.log.removeHandler(h)


def test_API_logDebug():
    """Debug apps log at DEBUG level."""
    app = API(name="test-debug", debug=True)
    assert app.log.getEffectiveLevel() == 10  # DEBUG

    for h in app.log.handlers:
        app.log.removeHandler(h)


def test_API_router_options():
    """Router options configure the default router."""
    app = API(name="test", configure_logs=False, case_sensitive=True)
    assert app.router.config.case_sensitive

    router = Router()
    assert API(name="test", router=router, configure_logs=False).router is router
    with pytest.raises(TypeError):
        API(name="test", router=router, strict_slashes=True)


def test_already_configured_no_handlers(app):
    """No handlers means not configured."""
    empty_logger = logging.getLogger("empty_test")
    empty_logger.handlers = []
    assert app._already_configured(empty_logger) is False


def test_already_configured_with_different_stream(app):
    """Only stdout handlers count."""
    test_logger = logging.getLogger("stream_test")
    test_logger.handlers = []
    handler = logging.StreamHandler(sys.stderr)
    test_logger.addHandler(handler)

    assert app._already_configured(test_logger) is False
    test_logger.removeHandler(handler)


def test_proxy_matched(app, event):
    """Matched routes call the action with the request."""
    view = Mock(spec=["show"])
    view.show.return_value = ok("heyyyy")
    app.route("/test/:user/:name", view, "show")

    res = app(event("GET", "/test/remote/pixel"), {})
    assert res == {
        "body": "heyyyy",
        "headers": {"Content-Type": "text/plain"},
        "statusCode": 200,
    }

    request = view.show.call_args[0][0]
    assert isinstance(request, Request)
    assert request.params == {"user": "remote", "name": "pixel"}
    assert request.args == ("remote", "pixel")
    assert request.method == "GET"
    assert request.route.action == "show"


def test_proxy_query_and_body(app, event):
    """Query parameters and base64 bodies reach the request."""
    view = Mock(spec=["create"])
    view.create.return_value = ok()
    app.route("/people", view, "create", "POST")

    app(
        event(
            "POST",
            "/people",
            queryStringParameters={"q": "1"},
            body=base64.b64encode(b'{"name": "joe"}').decode(),
            isBase64Encoded=True,
        ),
        {},
    )
    request = view.create.call_args[0][0]
    assert request.query == {"q": "1"}
    assert request.body == '{"name": "joe"}'


def test_proxy_headers_lower_case(app, event):
    """Header names are lower cased."""
    view = Mock(spec=["show"])
    view.show.return_value = ok()
    app.route("/", view)

    app(event("GET", "/", headers={"X-Custom": "value"}), {})
    assert view.show.call_args[0][0].headers == {"x-custom": "value"}


def test_proxy_head(app, event):
    """HEAD requests use the GET action without a body."""
    view = Mock(spec=["show"])
    view.show.return_value = ok("content")
    app.route("/page", view)

    res = app(event("HEAD", "/page"), {})
    assert res["statusCode"] == 200
    assert res["body"] == ""
    assert view.show.call_args[0][0].method == "HEAD"


def test_proxy_method_not_allowed(app, event):
    """Known paths answer 405 with an Allow header."""
    view = Mock(spec=["respond_get", "respond_put"])
    app.route("/x/y/z", view, "respond_put", "PUT").route(
        "/x/y/z", view, "respond_get", "GET"
    )

    res = app(event("POST", "/x/y/z"), {})
    assert res["statusCode"] == 405
    assert res["headers"]["Allow"] == "GET, PUT"
    assert json.loads(res["body"]) == {
        "errorMessage": "Method POST not defined on route"
    }
    view.respond_get.assert_not_called()
    view.respond_put.assert_not_called()


def test_proxy_custom_method_not_allowed(event):
    """A custom handler answers 405s."""
    response = Response(StatusCode.METHOD_NOT_ALLOWED, "text/plain", "no")
    handler = Mock(return_value=response)
    app = API(name="test", configure_logs=False, method_not_allowed=handler)
    view = Mock(spec=["respond"])
    app.route("/x", view, "respond", "PUT")

    res = app(event("DELETE", "/x"), {})
    assert res == {
        "body": "no",
        "headers": {"Allow": "PUT", "Content-Type": "text/plain"},
        "statusCode": 405,
    }
    request, allowed = handler.call_args[0]
    assert request.path == "/x"
    assert allowed == ("PUT",)


def test_proxy_not_found(app, event):
    """Unmatched paths answer 404."""
    res = app(event("GET", "/nothing"), {})
    assert res["statusCode"] == 404
    assert json.loads(res["body"]) == {
        "errorMessage": "No view function for: GET - /nothing"
    }


def test_proxy_next_handler(event):
    """Unmatched paths are handed to the next handler."""
    next_handler = Mock(return_value=ok("next"))
    app = API(name="test", configure_logs=False, next_handler=next_handler)

    res = app(event("GET", "/nothing"), {})
    assert res["body"] == "next"
    assert next_handler.call_args[0][0].path == "/nothing"


def test_proxy_missing_path(app):
    """Events without a path are rejected."""
    res = app({"httpMethod": "GET", "headers": {}}, {})
    assert res["statusCode"] == 400
    assert json.loads(res["body"]) == {"errorMessage": "Missing or invalid path"}


def test_proxy_action_error(app, event):
    """Action errors answer 500."""
    view = Mock(spec=["show"])
    view.show.side_effect = ValueError("broken")
    app.route("/", view)

    res = app(event("GET", "/"), {})
    assert res["statusCode"] == 500
    assert json.loads(res["body"]) == {"errorMessage": "broken"}


def test_proxy_http_api_event(app):
    """HTTP API payloads are routed too."""
    view = Mock(spec=["show"])
    view.show.return_value = ok()
    app.route("/users/:id", view)

    event = {
        "version": "2.0",
        "rawPath": "/users/3",
        "headers": {},
        "requestContext": {"http": {"method": "GET"}},
    }
    assert app(event, {})["statusCode"] == 200
    assert view.show.call_args[0][0].params == {"id": "3"}


def test_proxy_binary(app, event):
    """Binary bodies are base64 encoded."""
    view = Mock(spec=["show"])
    view.show.return_value = ok(b"\x89PNG", "image/png")
    app.route("/pixel.png", view)

    res = app(event("GET", "/pixel.png"), {})
    assert res["isBase64Encoded"] is True
    assert base64.b64decode(res["body"]) == b"\x89PNG"


def test_proxy_resources(app, event):
    """Resource helpers are available on the app."""

    class Pets:
        def show(self, request):
            return ok(request.params["id"])

        def list(self, request):
            return ok("all")

    assert app.resources("/pets", Pets()) is app
    assert app(event("GET", "/pets/7"), {})["body"] == "7"
    assert app(event("GET", "/pets"), {})["body"] == "all"
    assert app(event("DELETE", "/pets"), {})["headers"]["Allow"] == "GET"


def test_proxy_url_for(app, event):
    """URLs carry the stage prefix while a request is handled."""
    pets = Mock(spec=["show"])
    assert app.resource("/pet", pets, ":id") is app
    assert app.url_for(pets, "show") == "/pet"

    links = []

    class Users:
        def show(self, request):
            links.append(app.url_for(self, "show", NamedArguments(request.params)))
            return ok()

    app.route("/users/:id", Users())
    app(
        event(
            "GET",
            "/users/5",
            headers={"host": "abc.execute-api.eu-west-1.amazonaws.com"},
            requestContext={"stage": "prod"},
        ),
        {},
    )
    assert links == ["/prod/users/5"]
    assert app.host == "https://abc.execute-api.eu-west-1.amazonaws.com/prod"
