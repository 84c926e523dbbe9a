import logging

from liturgi.app.services.mailer import Mailer

logger = logging.getLogger(__name__)


class LoggingMailer(Mailer):
    """Writes outbound mail to the log instead of delivering it"""

    async def send(self, to: str, subject: str, body: str, link: str) -> None:
        logger.info(f"Email to={to} subject={subject!r} link={link}")
