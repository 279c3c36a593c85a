"""Exceptions raised by the Zoneless client."""

from __future__ import annotations

from typing import Optional


class ZonelessError(Exception):
    """Base class for every error raised by this package."""


class RemoteCallError(ZonelessError):
    """Raised when an API call fails, either at the server or in transport.

    Carries the reason reported by the server where one is available.
    """

    def __init__(
        self,
        message: str,
        *,
        type: str = "api_error",
        code: Optional[str] = None,
        param: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = type
        self.code = code
        self.param = param
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"RemoteCallError(type={self.type!r}, status_code={self.status_code!r}, "
            f"code={self.code!r}, message={self.message!r})"
        )


# Signer


class SignerError(ZonelessError):
    """Raised when a transaction cannot be signed locally."""


class DecodeError(SignerError):
    """Raised when the secret key or transaction text is not validly encoded."""


class MalformedTransactionError(SignerError):
    """Raised when decoded bytes do not parse into a transaction."""


class KeypairMismatchError(SignerError):
    """Raised when the secret key is not a required signer of the transaction."""


# Webhooks


class WebhookSignatureVerificationError(ZonelessError):
    """Raised when a webhook payload fails authentication."""


class MissingSignatureError(WebhookSignatureVerificationError):
    """Raised when the header carries no timestamp or no v1 signature."""


class TimestampToleranceError(WebhookSignatureVerificationError):
    """Raised when the signed timestamp is older than the tolerance window."""


class SignatureMismatchError(WebhookSignatureVerificationError):
    """Raised when no candidate signature matches the expected one."""


class PayloadDecodeError(ZonelessError):
    """Raised when an authenticated payload cannot be parsed into an event."""
