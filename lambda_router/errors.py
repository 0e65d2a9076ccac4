"""Router exception hierarchy.

Built-in bases are mixed in so callers catching ``ValueError``,
``AttributeError`` or ``TypeError`` keep working.
"""


class RouterError(Exception):
    """Base for all router errors."""


class InvalidVerbError(RouterError, ValueError):
    """Raised when a route is registered for an unsupported HTTP verb."""


class ActionNotFoundError(RouterError, AttributeError):
    """Raised when a route target does not expose the requested action."""


class MissingArgumentsError(RouterError, TypeError):
    """Raised when ``url_for`` is called without a target or an action."""
