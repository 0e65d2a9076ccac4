"""Regex patterns for path compilation and reverse resolution."""

import re

# Named parameter token: "/:name", ".:format", "/:id(\d+)", "/:other?", "/:path*"
param_pattern = re.compile(
    r"(?P<slash>/)?(?P<format>\.)?(?<!\?):(?P<name>\w+)"
    r"(?P<capture>\(.*?\))?(?P<optional>\?)?(?P<star>\*)?"
)

# Everything in a path spec that is not copied through verbatim
path_expr = re.compile(
    rf"(?P<token>{param_pattern.pattern})"
    r"|(?P<escape>\\.)"
    r"|(?P<group>\((?:\?P<(?P<group_name>\w+)>|(?!\?)))"
    r"|(?P<dot>\.)"
    r"|(?P<wildcard>\*)"
)

# Trailing wildcard marker in a literal path
wildcard_expr = re.compile(r"/\*")

# Pieces of a raw regular expression rewritten when building a URL from it
regex_tokens_expr = re.compile(
    r"^\^"
    r"|(?:\\?/\?)?\$$"
    r"|(?P<slash>\\/)"
    r"|(?P<escaped>\\[^\w\s])"
    r"|(?P<group>\((?:\?P<(?P<name>\w+)>|(?!\?))(?:[^()]|\([^()]*\))*\))"
)

# API Gateway greedy proxy resource, "/{proxy+}"
proxy_pattern = re.compile(r"/{(?P<name>.+)\+}$")
