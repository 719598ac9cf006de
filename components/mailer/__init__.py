from .errors import MailError, MailDeliveryError
from .smtp import SmtpMailer

__all__ = ["MailError", "MailDeliveryError", "SmtpMailer"]
