"""app: handle requests."""

import json

from lambda_router import API, NamedArguments, StatusCode
from lambda_router.types import Request, Response

app = API(name="app", debug=True)


class Pets:
    """REST controller bound with ``resources``."""

    name = "pets"

    def list(self, request: Request) -> Response:
        """Return every pet."""
        return Response(
            status_code=StatusCode.OK,
            content_type="application/json",
            body=json.dumps({"pets": ["cat", "dog"]}),
        )

    def show(self, request: Request) -> Response:
        """Return one pet, with a link to its edit form."""
        pet_id = request.params["id"]
        return Response(
            status_code=StatusCode.OK,
            content_type="application/json",
            body=json.dumps(
                {
                    "id": pet_id,
                    "edit": app.url_for(self, "edit", NamedArguments({"id": pet_id})),
                }
            ),
        )

    def edit(self, request: Request) -> Response:
        """Return the edit form."""
        return Response(
            status_code=StatusCode.OK,
            content_type="text/html",
            body=f"<form>{request.params['id']}</form>",
        )

    def create(self, request: Request) -> Response:
        """Echo the posted body."""
        return Response(
            status_code=StatusCode.OK, content_type="text/plain", body=request.body
        )


class Files:
    """Plain routes, with a wildcard and a format parameter."""

    def download(self, request: Request) -> Response:
        """Return the requested file name."""
        return Response(
            status_code=StatusCode.OK,
            content_type="text/plain",
            body=request.args[0] or "",
        )

    def report(self, request: Request) -> Response:
        """Return a report in the requested format."""
        return Response(
            status_code=StatusCode.OK,
            content_type="text/plain",
            body=request.params.get("format", "txt"),
        )


files = Files()

app.resources("/pets", Pets())
app.route("/files/*", files, "download").route(
    "/reports/:year(\\d{4}).:format?", files, "report"
)
