import logging

logger = logging.getLogger(__name__)


class EmailSender:
    """Delivers registration emails"""

    def send_verification_code(self, email: str, code: str) -> None:
        raise NotImplementedError


class LoggingEmailSender(EmailSender):
    """Records that a code was issued; SMTP delivery lives outside this service"""

    def send_verification_code(self, email: str, code: str) -> None:
        logger.info(f"Verification code issued for {email} ({len(code)} digits)")


_email_sender: EmailSender = LoggingEmailSender()


def get_email_sender() -> EmailSender:
    return _email_sender
