"""Jinja2 environment for email templates.

The environment for a templates directory is built on first use and reused
for the life of the process; nothing mutates it afterwards.
"""

from functools import lru_cache
from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from newsletter_api.core.exceptions import TemplateRenderError

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=None)
def get_template_environment(templates_dir: str) -> Environment:
    """Return the shared Jinja2 environment for ``templates_dir``.

    HTML templates are auto-escaped; plain text templates are not, so links
    stay intact.

    Raises:
        TemplateRenderError: If the directory does not exist.
    """
    template_path = Path(templates_dir)
    if not template_path.is_dir():
        raise TemplateRenderError(
            f"Template directory not found: {template_path}",
            context="load_templates",
        )

    environment = Environment(
        loader=FileSystemLoader(str(template_path)),
        autoescape=select_autoescape(enabled_extensions=("html",)),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    logger.info("Email template environment loaded", templates_dir=str(template_path))
    return environment
