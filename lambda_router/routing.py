"""Route entries and path to regex compilation."""

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from lambda_router.patterns import path_expr

PathSpec = Union[str, Sequence[str], re.Pattern]

DEFAULT_CAPTURE = r"([^/]+?)"
FORMAT_CAPTURE = r"([^/.]+?)"
TRAILING_WILDCARD = r"(/.*)?"


@dataclass(frozen=True)
class ParamDescriptor:
    """Describe one capture group of a compiled path."""

    name: Optional[str] = None
    optional: bool = False


@dataclass(frozen=True)
class CompiledPattern:
    """A path spec with its matcher.

    ``source`` is the identity of the route: registrations compiling to the
    same source are the same path across verbs.
    """

    path: PathSpec
    source: str
    matcher: re.Pattern
    params: Tuple[ParamDescriptor, ...] = ()

    @property
    def names(self) -> List[str]:
        """Return the names of the named parameters, in order."""
        return [param.name for param in self.params if param.name]


@dataclass(frozen=True)
class RouteEntry:
    """A compiled path bound to ``target.action`` for one HTTP verb.

    ``fallback`` entries answer "method not allowed" for verbs that were not
    registered. ``implicit`` entries are HEAD routes derived from GET.
    """

    pattern: CompiledPattern
    verb: str
    target: Any
    action: str
    handler: Optional[Callable[..., Any]] = None
    fallback: bool = False
    implicit: bool = False

    @property
    def path(self) -> PathSpec:
        """Return the path spec the entry was registered with."""
        return self.pattern.path


def _compile_param(match: re.Match, params: List[ParamDescriptor]) -> str:
    slash = match["slash"] or ""
    dot = r"\." if match["format"] else ""
    optional = bool(match["optional"])

    capture = match["capture"] or (FORMAT_CAPTURE if dot else DEFAULT_CAPTURE)
    groups = re.compile(capture).groups
    if not groups:
        capture = f"({capture})"
        groups = 1

    params.append(ParamDescriptor(match["name"], optional))
    params.extend(ParamDescriptor(optional=optional) for _ in range(groups - 1))

    expr = "" if optional else slash
    expr += f"(?:{slash if optional else ''}{dot}{capture})"
    if optional:
        expr += "?"
    if match["star"]:
        params.append(ParamDescriptor(optional=True))
        expr += TRAILING_WILDCARD
    return expr


def _compile_fragment(match: re.Match, params: List[ParamDescriptor]) -> str:
    if match["token"]:
        return _compile_param(match, params)
    if match["escape"]:
        return match["escape"]
    if match["dot"]:
        return r"\."
    if match["wildcard"]:
        params.append(ParamDescriptor())
        return "(.*)"

    params.append(ParamDescriptor(match["group_name"]))
    return match["group"]


def compile_path(
    path: PathSpec, case_sensitive: bool = False, strict: bool = False
) -> CompiledPattern:
    """Compile a path spec into a ``CompiledPattern``.

    ``path`` is either a compiled regular expression (used as is), a sequence
    of alternatives or a string such as ``/users/:id``. Named parameters may
    carry an inline pattern (``:id(\\d+)``), be optional (``:id?``), follow a
    dot (``.:format``) or swallow the rest of the path (``:path*``). A bare
    ``*`` matches anything.

    Unless ``strict`` is set a trailing slash is tolerated. Matching is case
    insensitive unless ``case_sensitive`` is set.
    """
    if isinstance(path, re.Pattern):
        names = {index: name for name, index in path.groupindex.items()}
        params = tuple(
            ParamDescriptor(names.get(index)) for index in range(1, path.groups + 1)
        )
        return CompiledPattern(path, path.pattern, path, params)

    if isinstance(path, str):
        expr = path
    else:
        path = tuple(path)
        expr = "(" + "|".join(path) + ")"

    descriptors: List[ParamDescriptor] = []
    parts: List[str] = []
    position = 0
    for match in path_expr.finditer(expr):
        parts.append(expr[position : match.start()])
        parts.append(_compile_fragment(match, descriptors))
        position = match.end()
    parts.append(expr[position:])

    if not strict:
        parts.append("/?")

    source = "^" + "".join(parts) + "$"
    flags = 0 if case_sensitive else re.IGNORECASE
    return CompiledPattern(path, source, re.compile(source, flags), tuple(descriptors))
