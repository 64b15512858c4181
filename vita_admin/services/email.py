import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.concurrency import run_in_threadpool

from vita_admin.core.config.settings import Settings, get_settings
from vita_admin.core.exceptions import NotificationFailure

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

class EmailNotifier:
    """
    Send templated HTML emails over SMTP.

    Delivery is blocking, so it runs in the threadpool. A failed delivery
    raises NotificationFailure; callers decide whether that is fatal.
    """

    def __init__(self, settings: Settings | None = None, template_dir: Path = TEMPLATE_DIR):
        self.settings = settings or get_settings()
        self.templates = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, template_name: str, **context) -> str:
        return self.templates.get_template(template_name).render(**context)

    def _deliver(self, to_email: str, subject: str, html_content: str) -> str:
        settings = self.settings
        msg = MIMEMultipart()
        msg['From'] = settings.DEFAULT_FROM_EMAIL
        msg['To'] = to_email
        msg['Subject'] = subject
        msg['Date'] = formatdate(localtime=True)
        msg['Message-ID'] = make_msgid(domain="vita")

        # Attach HTML content
        msg.attach(MIMEText(html_content, 'html'))

        with smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=settings.EMAIL_TIMEOUT_SECONDS) as server:
            if settings.EMAIL_USE_TLS:
                server.starttls()
            if settings.EMAIL_HOST_USER:
                server.login(settings.EMAIL_HOST_USER, settings.EMAIL_HOST_PASSWORD)
            server.sendmail(settings.EMAIL_HOST_USER or settings.DEFAULT_FROM_EMAIL, to_email, msg.as_string())

        return msg['Message-ID']

    async def send(self, to_email: str, subject: str, template_name: str, **context) -> str:
        """
        Render ``template_name`` and email it to ``to_email``.

        Returns:
            The Message-ID of the sent email
        """
        html_content = self.render(template_name, **context)
        try:
            message_id = await run_in_threadpool(self._deliver, to_email, subject, html_content)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' email: %s", subject, e)
            raise NotificationFailure() from e

        logger.info("Sent '%s' email %s", subject, message_id)
        return message_id

@lru_cache()
def get_notifier() -> EmailNotifier:
    return EmailNotifier()
