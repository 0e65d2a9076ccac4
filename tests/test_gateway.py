"""Test gateway functionality."""

from lambda_router.gateway import (
    ApigwPath,
    _get_apigw_stage,
    _get_http_method,
    _get_request_path,
)


def test_api_gateway_path_variations():
    """Test various ApigwPath scenarios."""
    event = {"version": "2.0", "path": "/test", "headers": {}}
    path = ApigwPath(event)
    assert path.version == "2.0"

    event = {"path": "/test", "headers": {}}
    path = ApigwPath(event)
    assert path.version is None
    assert path.prefix == ""


def test_get_apigw_stage_no_execute_api():
    """No stage when the host is a custom domain."""
    event = {
        "headers": {"host": "example.com"},
        "requestContext": {"stage": "production"},
    }
    assert _get_apigw_stage(event) == ""


def test_get_apigw_stage_x_forwarded_host():
    """The stage is read for execute-api hosts."""
    event = {
        "headers": {"x-forwarded-host": "api.execute-api.us-east-1.amazonaws.com"},
        "requestContext": {"stage": "production"},
    }
    assert _get_apigw_stage(event) == "production"


def test_get_request_path_no_proxy():
    """The event path is used for plain resources."""
    event = {"resource": "/static/path", "path": "/static/path"}
    assert _get_request_path(event) == "/static/path"


def test_get_request_path_with_proxy():
    """The greedy path parameter is used for proxy resources."""
    event = {
        "resource": "/{proxy+}",
        "pathParameters": {"proxy": "test/path"},
        "path": "/test/path",
    }
    assert _get_request_path(event) == "/test/path"


def test_get_request_path_proxy_root():
    """A proxy resource without path parameters routes the root."""
    event = {"resource": "/{proxy+}", "pathParameters": None, "path": "/"}
    assert _get_request_path(event) == "/"


def test_get_request_path_http_api():
    """HTTP API payloads carry ``rawPath``."""
    event = {"version": "2.0", "rawPath": "/users/1", "routeKey": "$default"}
    assert _get_request_path(event) == "/users/1"
    assert _get_request_path({}) is None


def test_get_http_method():
    """The verb is read from both payload versions."""
    assert _get_http_method({"httpMethod": "get"}) == "GET"
    assert (
        _get_http_method({"requestContext": {"http": {"method": "PATCH"}}})
        == "PATCH"
    )
    assert _get_http_method({}) == ""


def test_prefix_with_stage():
    """The stage prefixes the API."""
    event = {
        "resource": "/api/{proxy+}",
        "pathParameters": {"proxy": "users"},
        "path": "/api/users",
        "httpMethod": "GET",
        "headers": {"host": "abc.execute-api.eu-west-1.amazonaws.com"},
        "requestContext": {"stage": "prod"},
    }
    path = ApigwPath(event)
    assert path.method == "GET"
    assert path.path == "/users"
    assert path.api_prefix == "/api"
    assert path.prefix == "/prod/api"


def test_prefix_with_path_mapping():
    """Custom domain base path mappings prefix the API."""
    event = {
        "resource": "/{proxy+}",
        "pathParameters": {"proxy": "users"},
        "path": "/v1/users",
        "headers": {"host": "api.example.com"},
    }
    path = ApigwPath(event)
    assert path.path_mapping == "/v1"
    assert path.prefix == "/v1"
