"""
Session duration selection for AssumeRoleWithSAML.

There is no way to learn a role's MaxSessionDuration from the assertion, so
a duration that is too long is only caught when STS rejects the request.
Values are chosen in this order:

1. Override configured for the role
2. SessionDuration attribute in the SAML assertion
3. Default of 1 hour
"""
import logging
from typing import Mapping

from api.services.assertion import SESSION_DURATION_ATTRIBUTE, ParsedAssertion
from api.services.exceptions import DurationAttributeUnreadable


logger = logging.getLogger(__name__)

MIN_SESSION_DURATION = 900  # 15 minutes
MAX_SESSION_DURATION = 43200  # 12 hours
DEFAULT_SESSION_DURATION = 3600  # 1 hour


def _declared_duration(document: ParsedAssertion) -> int | None:
    attribute = document.get_attribute(SESSION_DURATION_ATTRIBUTE)
    if attribute is None:
        return None
    if not attribute.values:
        raise DurationAttributeUnreadable("SessionDuration attribute has no value")

    text = attribute.values[0].strip()
    # int() would also take "+900", "1_200" and non-ASCII digits
    if not (text.isascii() and text.isdigit()):
        raise DurationAttributeUnreadable(f"SessionDuration is not an integer: {text!r}")
    duration = int(text)

    if not MIN_SESSION_DURATION <= duration <= MAX_SESSION_DURATION:
        raise DurationAttributeUnreadable(
            f"SessionDuration {duration} is outside "
            f"{MIN_SESSION_DURATION}-{MAX_SESSION_DURATION} seconds"
        )
    return duration


def resolve_session_duration(
    document: ParsedAssertion,
    role_arn: str,
    overrides: Mapping[str, int],
) -> int:
    """
    Get the session duration to request for a role.

    Args:
        document: Parsed SAML assertion
        role_arn: ARN of the role being assumed
        overrides: Role ARN to duration in seconds; used as-is, without a bounds check

    Returns:
        Duration in seconds
    """
    override = overrides.get(role_arn)
    if override is not None:
        return override

    try:
        declared = _declared_duration(document)
    except DurationAttributeUnreadable as e:
        logger.warning(f"Was not able to read SessionDuration attribute from SAML token: {e}")
        declared = None

    if declared is not None:
        return declared

    return DEFAULT_SESSION_DURATION
