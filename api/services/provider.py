"""
Identity provider lookup for a selected role.
"""
from typing import List

from api.services.assertion import ROLE_ATTRIBUTE, ParsedAssertion, RoleAttributeEntry
from api.services.exceptions import ProviderNotFoundError


def _role_values(document: ParsedAssertion) -> List[str]:
    values = []
    for attribute in document.get_attributes(ROLE_ATTRIBUTE):
        values.extend(attribute.values)
    return values


def _find_role_value(document: ParsedAssertion, role_arn: str) -> str | None:
    candidates = [value for value in _role_values(document) if role_arn in value]
    if not candidates:
        return None

    # A role whose ARN is a prefix of another role's ARN matches both values
    for value in candidates:
        if role_arn in (part.strip() for part in value.split(",")):
            return value
    return candidates[0]


def resolve_identity_provider(document: ParsedAssertion, role_arn: str) -> str:
    """
    Find the ARN of the identity provider paired with a role.

    The Role attribute holds "provider,role" pairs. The provider is usually
    listed first but not always, so the first part is used only when it
    carries the saml-provider marker.

    Args:
        document: Parsed SAML assertion
        role_arn: ARN of the role the user selected

    Returns:
        The SAML provider ARN to use as PrincipalArn

    Raises:
        ProviderNotFoundError: If no role is selected, or no Role attribute value names it
    """
    if not role_arn.strip():
        raise ProviderNotFoundError(role_arn, "No role selected")

    value = _find_role_value(document, role_arn)
    if value is None:
        raise ProviderNotFoundError(role_arn)

    entry = RoleAttributeEntry.from_value(value)
    if entry is None:
        raise ProviderNotFoundError(
            role_arn,
            f"Role attribute value for {role_arn} is not a provider,role pair: {value}"
        )
    return entry.principal_arn
