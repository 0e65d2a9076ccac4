"""lambda-router: controller based routing for AWS Lambda proxy requests."""

from enum import Enum

__version__ = "1.0.0"

HTTP_METHODS = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "TRACE",
    "OPTIONS",
    "CONNECT",
    "PATCH",
)


class StatusCode(Enum):
    """HTTP status codes returned by the proxy."""

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500


from lambda_router.proxy import API  # noqa: E402
from lambda_router.reverse import (  # noqa: E402
    MixedArguments,
    NamedArguments,
    PositionalArguments,
    flatten_arguments,
)
from lambda_router.router import Router  # noqa: E402

__all__ = [
    "API",
    "HTTP_METHODS",
    "MixedArguments",
    "NamedArguments",
    "PositionalArguments",
    "Router",
    "StatusCode",
    "flatten_arguments",
]
