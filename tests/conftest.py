from unittest.mock import Mock

import pytest

from lambda_router.router import Router

ACTIONS = ["list", "new", "create", "show", "edit", "update", "destroy"]


@pytest.fixture
def router():
    """Fresh router with default options."""
    return Router()


@pytest.fixture
def view():
    """Controller exposing ``respond``, ``respond_get`` and ``respond_put``."""
    return Mock(spec=["respond", "respond_get", "respond_put"])


@pytest.fixture
def controller():
    """Controller exposing every resource action."""
    return Mock(spec=ACTIONS)


@pytest.fixture
def event():
    """Build a minimal API Gateway REST event."""

    def _event(method, path, **extra):
        data = {
            "path": path,
            "httpMethod": method,
            "headers": {},
            "queryStringParameters": {},
        }
        data.update(extra)
        return data

    return _event
