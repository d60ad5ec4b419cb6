"""Jinja2 template factory for gateway HTML pages."""

from pathlib import Path

from starlette.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def create_templates(app_name: str = "Omnitrix Gateway") -> Jinja2Templates:
    """Create the Jinja2 template engine with gateway-wide globals."""
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.globals["app_name"] = app_name
    return templates
