"""
autogitpull Services

Authorization, script execution and notification delivery.
"""

from .address_authorizer import AddressAuthorizer, is_permitted
from .notification_service import MailTransport, NotificationSink, SmtpMailTransport
from .script_runner import ScriptRunner

__all__ = [
    "AddressAuthorizer",
    "is_permitted",
    "MailTransport",
    "NotificationSink",
    "SmtpMailTransport",
    "ScriptRunner",
]
