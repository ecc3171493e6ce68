"""SMS gateway adapter."""

from app.infrastructure.external.sms.http_transport import HttpSmsTransport

__all__ = ["HttpSmsTransport"]
