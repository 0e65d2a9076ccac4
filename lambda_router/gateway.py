"""API Gateway event parsing, REST (v1) and HTTP API (v2) payloads."""

from typing import Dict, Optional

from lambda_router.patterns import proxy_pattern


def _get_apigw_stage(event: Dict) -> str:
    """Return API Gateway stage name."""
    headers = event.get("headers") or {}
    host = headers.get("x-forwarded-host", headers.get("host", ""))
    if ".execute-api." in host and ".amazonaws.com" in host:
        return (event.get("requestContext") or {}).get("stage", "")
    return ""


def _get_request_path(event: Dict) -> Optional[str]:
    """Return the path to route on."""
    resource_proxy = proxy_pattern.search(event.get("resource") or "/")
    if resource_proxy:
        parameters = event.get("pathParameters") or {}
        return "/" + (parameters.get(resource_proxy["name"]) or "")

    return event.get("path") or event.get("rawPath")


def _get_http_method(event: Dict) -> str:
    """Return the upper cased request verb."""
    method = event.get("httpMethod")
    if not method:
        http = (event.get("requestContext") or {}).get("http") or {}
        method = http.get("method", "")
    return method.upper()


class ApigwPath:
    """Parse path and verb of an API call."""

    def __init__(self, event: Dict):
        self.version = event.get("version")
        self.method = _get_http_method(event)
        self.apigw_stage = _get_apigw_stage(event)
        self.path = _get_request_path(event)
        self.api_prefix = proxy_pattern.sub("", event.get("resource") or "").rstrip(
            "/"
        )
        if not self.apigw_stage and self.path:
            path = event.get("path") or event.get("rawPath") or ""
            self.path_mapping = path.replace(self.api_prefix + self.path, "")
        else:
            self.path_mapping = ""

    @property
    def prefix(self) -> str:
        """Return the prefix the API is mounted under."""
        if self.apigw_stage and self.apigw_stage != "$default":
            return f"/{self.apigw_stage}" + self.api_prefix
        if self.path_mapping:
            return self.path_mapping + self.api_prefix
        return self.api_prefix
