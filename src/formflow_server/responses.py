"""Controller-result conversion.

Controllers return ``RenderResult`` / ``RedirectResult`` / ``NotFoundResult``.
Routes hand those to :func:`to_response`, which renders the view model as
JSON, issues a 303 redirect, or returns a JSON 404.
"""

from fastapi.responses import JSONResponse, RedirectResponse, Response

from formflow_journeys.models.session import ControllerResult, NotFoundResult, RedirectResult


def to_response(result: ControllerResult) -> Response:
    """Turn a controller outcome into an HTTP response."""
    if isinstance(result, RedirectResult):
        return RedirectResponse(url=result.location, status_code=303)
    if isinstance(result, NotFoundResult):
        return JSONResponse(status_code=404, content={"detail": result.message})
    return JSONResponse(
        status_code=result.status_code,
        content={"view": result.view, "model": result.model},
    )
