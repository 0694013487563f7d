"""Template rendering for email notifications using Jinja2.

Missing variables raise instead of rendering blank, so a context that does
not match the templates is caught on the first send.
"""

from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from app.logging import get_logger

from .models import NotificationTemplateError

logger = get_logger(__name__, component="notification")


def _is_html_template(template_name) -> bool:
    """Escape HTML bodies only; subject and text bodies are plain text."""
    return bool(template_name) and ".html" in template_name


class TemplateRenderer:
    """Renders the subject, HTML body and text body of a notification email.

    Templates are loaded from the app.notifications.email_templates package
    directory and cached by the Jinja2 environment.
    """

    def __init__(
        self,
        template_dir: str = "email_templates",
        subject_template: str = "match_subject.j2",
        html_template: str = "match_body.html.j2",
        text_template: str = "match_body.txt.j2",
    ):
        """Initialize template renderer with Jinja2 environment.

        Args:
            template_dir: Directory name within app.notifications package
            subject_template: Filename of subject line template
            html_template: Filename of HTML body template
            text_template: Filename of plain text body template
        """
        self.subject_template_name = subject_template
        self.html_template_name = html_template
        self.text_template_name = text_template

        self.env = Environment(
            loader=PackageLoader("app.notifications", template_dir),
            autoescape=_is_html_template,
            undefined=StrictUndefined,
        )

    def render(self, context: Dict) -> Dict[str, str]:
        """Render all email templates with the provided context.

        Args:
            context: Dictionary of template variables

        Returns:
            Dictionary containing:
            - subject: Rendered subject line (single line, no newlines)
            - html_body: Rendered HTML body
            - text_body: Rendered plain text body

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        try:
            subject = (
                self.env.get_template(self.subject_template_name)
                .render(context)
                .strip()
                .replace("\n", " ")
            )
            html_body = self.env.get_template(self.html_template_name).render(context)
            text_body = self.env.get_template(self.text_template_name).render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            logger.error(error_msg, extra={"event": "notification.template.failed"})
            raise NotificationTemplateError(error_msg) from e

        logger.debug(
            "Rendered notification templates",
            extra={"event": "notification.template.rendered"},
        )
        return {
            "subject": subject,
            "html_body": html_body,
            "text_body": text_body,
        }
