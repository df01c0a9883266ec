"""Browser pages."""

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from src.api.dependencies import SessionGate, get_settings, get_telemetry_store
from src.config import Settings
from src.errors import AuthPolicy
from src.services.auth import Identity
from src.services.telemetry import DEFAULT_LIST_LIMIT, TelemetryStore

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter(tags=["pages"])


def render_page(
    request: Request,
    template_name: str,
    status_code: int = status.HTTP_200_OK,
    **context,
) -> HTMLResponse:
    """Render a template with the common page context."""
    settings: Settings = request.app.state.settings
    context.setdefault("error", None)
    context.setdefault("login_path", settings.login_path)
    return templates.TemplateResponse(request, template_name, context, status_code=status_code)


@router.get("/", include_in_schema=False)
async def index(settings: Annotated[Settings, Depends(get_settings)]):
    """Send browsers to their dashboard."""
    return RedirectResponse(settings.post_login_path, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    """Render the signup form."""
    return render_page(request, "signup.html")


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Render the login form."""
    return render_page(request, "login.html")


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    request: Request,
    identity: Annotated[Identity, Depends(SessionGate(AuthPolicy.INTERACTIVE))],
    store: Annotated[TelemetryStore, Depends(get_telemetry_store)],
):
    """Render the logged-in user's readings, newest first."""
    readings = store.list_readings(identity.user_id, limit=DEFAULT_LIST_LIMIT)
    return render_page(request, "dashboard.html", readings=readings)
