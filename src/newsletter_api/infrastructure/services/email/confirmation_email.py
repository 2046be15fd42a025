"""Renders the confirmation email sent after a subscription request."""

from typing import Any

import structlog
from jinja2 import Environment, TemplateError, TemplateNotFound

from newsletter_api.core.exceptions import TemplateRenderError
from newsletter_api.domain.interfaces.notification import (
    ConfirmationEmail,
    ConfirmationNotice,
    IConfirmationEmailBuilder,
)

logger = structlog.get_logger(__name__)

HTML_TEMPLATE = "confirmation.html"
TEXT_TEMPLATE = "confirmation.txt"


class ConfirmationEmailBuilder(IConfirmationEmailBuilder):
    """Builds the HTML and plain text bodies of a confirmation email.

    Features:
    - Template-based rendering with an injected, shared Jinja2 environment
    - HTML and plain text alternatives of the same content
    """

    def __init__(self, environment: Environment, project_name: str):
        self._environment = environment
        self._project_name = project_name

    def build(self, notice: ConfirmationNotice) -> ConfirmationEmail:
        context = {
            "name": notice.name,
            "url": notice.confirmation_link,
            "project_name": self._project_name,
        }
        return ConfirmationEmail(
            subject=f"Welcome to {self._project_name}! Please confirm your subscription",
            html_body=self._render_template(HTML_TEMPLATE, **context),
            text_body=self._render_template(TEXT_TEMPLATE, **context),
        )

    def _render_template(self, template_name: str, **context: Any) -> str:
        """Render email template with provided context.

        Raises:
            TemplateRenderError: If template rendering fails
        """
        try:
            return self._environment.get_template(template_name).render(**context)
        except TemplateNotFound as e:
            logger.error("Template not found", template=template_name, error=str(e))
            raise TemplateRenderError(
                f"Template file not found: {template_name}",
                context="render_template",
                cause=e,
            ) from e
        except TemplateError as e:
            logger.error("Template rendering failed", template=template_name, error=str(e))
            raise TemplateRenderError(
                f"Template rendering failed: {e}",
                context="render_template",
                cause=e,
            ) from e
