# storefront/services/mail_service.py
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from storefront.utils.settings import (
    SMTP_SERVER,
    SMTP_PORT,
    SENDER_EMAIL,
    SENDER_PASSWORD,
    SHOP_NAME,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_RECEIPT_BODY = """<strong>Hey {name},</strong>
<p>You just bought an item from {shop}. Thank you for making this order.</p>
<br />
<p>Regards</p>"""


class MailService:
    def __init__(
        self,
        server: str | None = None,
        port: int | None = None,
        sender: str | None = None,
        password: str | None = None,
    ):
        self.smtp_server = server or SMTP_SERVER
        self.smtp_port = port or SMTP_PORT
        self.sender_email = sender or SENDER_EMAIL
        self.sender_password = password or SENDER_PASSWORD

    def build_receipt(self, recipient_email: str, recipient_name: str) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = f'"{SHOP_NAME}" <{self.sender_email}>'
        msg["To"] = recipient_email
        msg["Subject"] = "Thank you for shopping with us"
        msg.attach(MIMEText(_RECEIPT_BODY.format(name=recipient_name, shop=SHOP_NAME), "html"))
        return msg

    def send(self, recipient_email: str, recipient_name: str) -> None:
        """Send the purchase receipt. smtplib errors propagate."""
        msg = self.build_receipt(recipient_email, recipient_name)

        with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=10) as server:
            server.starttls()
            if self.sender_password:
                server.login(self.sender_email, self.sender_password)
            server.sendmail(self.sender_email, [recipient_email], msg.as_string())

        logger.info(f"Receipt mailed to {recipient_email}")
