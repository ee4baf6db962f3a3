"""Visitor-facing endpoints: variant assignment and conversion tracking.

Assignments travel to the browser as short-lived cookies named
``<cookie_prefix><experiment>`` and come back on the conversion request.
Experiment names and labels are percent-encoded so any string is a legal
cookie key or value.
"""

from html import escape
from urllib.parse import quote, unquote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from loguru import logger

from src.api.config import get_api_settings
from src.api.schemas.experiments import AssignmentsResponse, ConversionResponse
from src.api.services.experiment_service import ExperimentService, get_experiment_service

router = APIRouter(tags=["assignments"])
api_settings = get_api_settings()

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head><title>{title}</title></head>
<body>
<h1>{title}</h1>
<ul>
{rows}
</ul>
<a href="/convert"><button style="background-color: {button_color}">Convert</button></a>
</body>
</html>
"""


def _set_assignment_cookies(response: Response, assignments: dict[str, str]) -> None:
    for name, label in assignments.items():
        response.set_cookie(
            key=f"{api_settings.cookie_prefix}{quote(name, safe='')}",
            value=quote(label, safe=""),
            max_age=api_settings.cookie_max_age_seconds,
        )


def _read_assignment_cookies(request: Request) -> dict[str, str]:
    prefix = api_settings.cookie_prefix
    return {
        unquote(key[len(prefix):]): unquote(value)
        for key, value in request.cookies.items()
        if key.startswith(prefix)
    }


def render_page(assignments: dict[str, str]) -> str:
    """Render the landing page for a set of assignments."""
    rows = "\n".join(
        f"<li>{escape(name)}: {escape(label)}</li>"
        for name, label in sorted(assignments.items())
    )
    return PAGE_TEMPLATE.format(
        title=escape(assignments.get("title_text", api_settings.api_title)),
        rows=rows,
        button_color=escape(assignments.get("button_color", "gray")),
    )


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    """Redirect to the landing page."""
    return RedirectResponse(url="/index", status_code=307)


@router.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    """No favicon is served."""
    return Response(status_code=404)


@router.get("/index", response_class=HTMLResponse)
async def index(
    service: ExperimentService = Depends(get_experiment_service),
) -> HTMLResponse:
    """Assign a variant of every experiment and render the landing page."""
    assignments = service.sampler.sample_all()

    response = HTMLResponse(content=render_page(assignments))
    _set_assignment_cookies(response, assignments)
    return response


@router.get("/assignments", response_model=AssignmentsResponse)
async def get_assignments(
    response: Response,
    service: ExperimentService = Depends(get_experiment_service),
) -> AssignmentsResponse:
    """Assign a variant of every experiment.

    Sets the same cookies as /index but answers with JSON.
    """
    assignments = service.sampler.sample_all()
    _set_assignment_cookies(response, assignments)
    return AssignmentsResponse(assignments=assignments)


@router.get("/convert", include_in_schema=False)
async def convert(
    request: Request,
    service: ExperimentService = Depends(get_experiment_service),
) -> RedirectResponse:
    """Credit a conversion for every assignment cookie, then go back to /index."""
    assignments = _read_assignment_cookies(request)
    service.attributor.attribute_many(assignments)
    return RedirectResponse(url="/index", status_code=307)


@router.post("/conversions", response_model=ConversionResponse)
async def record_conversions(
    request: Request,
    service: ExperimentService = Depends(get_experiment_service),
) -> ConversionResponse:
    """Credit a conversion for every assignment cookie.

    Unknown experiments or labels are counted as dropped, not rejected.
    """
    assignments = _read_assignment_cookies(request)
    recorded = service.attributor.attribute_many(assignments)

    if recorded < len(assignments):
        logger.debug(f"Recorded {recorded} of {len(assignments)} conversions")

    return ConversionResponse(received=len(assignments), recorded=recorded)
