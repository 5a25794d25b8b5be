"""
Exceptions raised while turning a SAML assertion into AWS credentials.

Only MalformedAssertionError, ProviderNotFoundError and ExchangeError abort a
credential request. DurationAttributeUnreadable and PreferenceStoreError are
raised internally and always recovered from.
"""


class SamlAccessError(Exception):
    """Base class for all errors raised by this package."""


class MalformedAssertionError(SamlAccessError):
    """The SAMLResponse could not be base64-decoded or parsed as XML."""


class ProviderNotFoundError(SamlAccessError):
    """No Role attribute value names an identity provider for the selected role."""

    def __init__(self, role_arn: str, message: str | None = None):
        self.role_arn = role_arn
        super().__init__(message or f"Failed to find IDP ARN for selected role: {role_arn}")


class ExchangeError(SamlAccessError):
    """STS rejected the AssumeRoleWithSAML request."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class DurationAttributeUnreadable(SamlAccessError):
    """The SessionDuration attribute is missing a value, not an integer, or out of bounds."""


class PreferenceStoreError(SamlAccessError):
    """A preference could not be read from or written to its backend."""


class UnknownExportFormatError(SamlAccessError):
    """The requested export format does not exist."""

    def __init__(self, format_id: str):
        self.format_id = format_id
        super().__init__(f"Unknown export format: {format_id}")
