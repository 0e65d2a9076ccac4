"""Router configuration."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

# Resource action keys mapped to controller method names.
RESOURCE_ACTIONS: Dict[str, str] = {
    "list": "list",
    "new": "new",
    "create": "create",
    "show": "show",
    "edit": "edit",
    "update": "update",
    "destroy": "destroy",
}


@dataclass(frozen=True)
class RouterConfig:
    """Options fixed at router construction time.

    ``method_not_allowed`` is called as ``handler(request, allowed)`` by the
    Lambda adapter when a path exists but not for the requested verb.
    """

    case_sensitive: bool = False
    strict_slashes: bool = False
    method_not_allowed: Optional[Callable[..., Any]] = None
    resource_actions: Dict[str, str] = field(
        default_factory=lambda: dict(RESOURCE_ACTIONS)
    )

    def replace(self, **options) -> "RouterConfig":
        """Return a copy with ``options`` applied.

        ``resource_actions`` overrides are merged over the current table,
        empty values keep the current name.
        """
        overrides = options.pop("resource_actions", None) or {}
        unknown = set(overrides) - set(RESOURCE_ACTIONS)
        if unknown:
            raise TypeError(
                f"Unknown resource actions: {', '.join(sorted(unknown))}"
            )

        actions = dict(self.resource_actions)
        actions.update({key: value for key, value in overrides.items() if value})
        return dataclasses.replace(self, resource_actions=actions, **options)
