"""Reverse routing: build a URL from a target, an action and arguments."""

import itertools
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from lambda_router import HTTP_METHODS
from lambda_router.errors import MissingArgumentsError
from lambda_router.patterns import param_pattern, regex_tokens_expr, wildcard_expr
from lambda_router.routing import RouteEntry


@dataclass(frozen=True)
class NamedArguments:
    """Values for named parameters, ``{"id": 42}``."""

    values: Mapping = field(default_factory=dict)


@dataclass(frozen=True)
class PositionalArguments:
    """Values for unnamed groups and wildcards, in order."""

    values: Sequence[Any] = ()


@dataclass(frozen=True)
class MixedArguments:
    named: Mapping = field(default_factory=dict)
    positional: Sequence[Any] = ()


RouteArguments = Union[NamedArguments, PositionalArguments, MixedArguments]


def flatten_arguments(*values: Any) -> MixedArguments:
    """Merge loose values into ``MixedArguments``.

    Mappings are merged into the named arguments, lists and tuples extend
    the positional ones and anything else is appended to them.
    """
    named: Dict[str, Any] = {}
    positional: List[Any] = []
    for value in values:
        if isinstance(value, Mapping):
            named.update(value)
        elif isinstance(value, (list, tuple)):
            positional.extend(value)
        else:
            positional.append(value)
    return MixedArguments(named, tuple(positional))


def _unpack(arguments: Optional[RouteArguments]) -> Tuple[Dict[str, Any], List[Any]]:
    if arguments is None:
        return {}, []
    if isinstance(arguments, NamedArguments):
        return dict(arguments.values), []
    if isinstance(arguments, PositionalArguments):
        return {}, list(arguments.values)
    if isinstance(arguments, MixedArguments):
        return dict(arguments.named), list(arguments.positional)
    raise TypeError(f"Unsupported route arguments: {arguments!r}")


def _declared_name(target: Any) -> Optional[str]:
    name = getattr(target, "name", None)
    if isinstance(name, str):
        return name
    return getattr(target, "__name__", None)


def find_route(
    routes: Mapping, target: Any, action: str
) -> Optional[RouteEntry]:
    """Return the first explicit entry bound to ``target.action``.

    ``target`` is either the registered object or its declared name.
    """
    for verb in HTTP_METHODS:
        for entry in routes.get(verb, {}).values():
            if entry.fallback or entry.action != action:
                continue
            if entry.target is target or _declared_name(entry.target) == target:
                return entry
    return None


def _interpolate_regex(
    pattern: re.Pattern, named: Dict[str, Any], positional: List[Any]
) -> str:
    remaining = iter(positional)
    groups = itertools.count()

    def _replace(match: re.Match) -> str:
        if match["slash"]:
            return "/"
        if match["escaped"]:
            return match["escaped"][1]
        if match["group"] is None:
            return ""

        index = next(groups)
        name = match["name"]
        if name and named.get(name) is not None:
            return quote(str(named[name]), safe="")
        value = next(remaining, None)
        if value is None:
            return f":{index}"
        return quote(str(value), safe="/")

    return regex_tokens_expr.sub(_replace, pattern.pattern)


def _interpolate_path(path: str, named: Dict[str, Any], positional: List[Any]) -> str:
    def _replace(match: re.Match) -> str:
        value = named.get(match["name"])
        slash = match["slash"] or ""
        if value is not None:
            dot = "." if match["format"] else ""
            return f"{slash}{dot}{quote(str(value), safe='')}"
        if match["optional"]:
            return slash
        return match[0]

    def _wildcard(match: re.Match) -> str:
        if named.get("*") is not None:
            return "/" + quote(str(named["*"]), safe="/")
        if positional:
            rest = "/".join(quote(str(value), safe="/") for value in positional)
            positional.clear()
            return "/" + rest
        return "/*"

    url = param_pattern.sub(_replace, path)
    return wildcard_expr.sub(_wildcard, url)


def url_for(
    routes: Mapping,
    target: Any,
    action: str,
    arguments: Optional[RouteArguments] = None,
) -> str:
    """Build the URL routed to ``target.action``.

    Returns an empty string when no route points there. Groups of a raw
    regex route are filled in when nested at most one level deep.
    """
    if target is None or target == "" or not action:
        raise MissingArgumentsError("url_for() expects a target and an action")

    entry = find_route(routes, target, action)
    if entry is None:
        return ""

    named, positional = _unpack(arguments)
    path = entry.path
    if isinstance(path, re.Pattern):
        return _interpolate_regex(path, named, positional)
    if not isinstance(path, str):
        path = next(iter(path))
    return _interpolate_path(path, named, positional)
