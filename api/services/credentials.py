"""
Credential workflow: SAMLResponse and selected role in, credentials and
ready-to-paste exports out.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from api.services import arns
from api.services.assertion import RoleAttributeEntry, parse_assertion
from api.services.duration import resolve_session_duration
from api.services.exports import EXPORT_FORMATS, PROFILE_CONFIG, render, render_all
from api.services.exceptions import UnknownExportFormatError
from api.services.preferences import PreferenceStore
from api.services.provider import resolve_identity_provider
from api.services.sts import CredentialSet, SamlRoleExchange


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialBundle:
    """Everything the user is shown for one credential request."""
    credentials: CredentialSet
    role_arn: str
    account_id: str
    role_name: str
    profile_name: str
    exports: Dict[str, str] = field(default_factory=dict)
    selected_format: str | None = None


class CredentialService:
    """Turns a SAML assertion into temporary credentials for a selected role."""

    def __init__(
        self,
        exchange: SamlRoleExchange,
        preferences: PreferenceStore,
        duration_overrides: Mapping[str, int]
    ):
        self.exchange = exchange
        self.preferences = preferences
        self.duration_overrides = duration_overrides

    def list_roles(self, saml_response: str) -> List[RoleAttributeEntry]:
        """
        List the roles a SAML assertion allows.

        Raises:
            MalformedAssertionError: If the assertion cannot be parsed
        """
        return parse_assertion(saml_response).roles()

    def profile_name_for(self, role_arn: str) -> str:
        """Get the profile name to suggest for a role."""
        key = arns.preference_key(role_arn)
        return self.preferences.get_profile_name(key, key)

    async def get_credentials(self, saml_response: str, role_arn: str) -> CredentialBundle:
        """
        Assume a role with a SAML assertion and render the credentials.

        Args:
            saml_response: Base64 encoded SAMLResponse
            role_arn: ARN of the selected role

        Returns:
            The credentials with every export format pre-rendered

        Raises:
            MalformedAssertionError: If the assertion cannot be parsed
            ProviderNotFoundError: If the assertion does not list the role
            ExchangeError: If STS rejects the request
        """
        document = parse_assertion(saml_response)
        principal_arn = resolve_identity_provider(document, role_arn)
        duration = resolve_session_duration(document, role_arn, self.duration_overrides)

        credentials = await self.exchange.assume_role(
            principal_arn=principal_arn,
            role_arn=role_arn,
            encoded_assertion=saml_response,
            duration=duration
        )
        logger.info(f"Issued credentials for {role_arn}, expiring {credentials.expiration.isoformat()}")

        profile_name = self.profile_name_for(role_arn)
        return CredentialBundle(
            credentials=credentials,
            role_arn=role_arn,
            account_id=arns.account_id(role_arn),
            role_name=arns.role_name(role_arn),
            profile_name=profile_name,
            exports=render_all(credentials, profile_name),
            selected_format=self.preferences.get_last_format()
        )

    def rename_profile(self, credentials: CredentialSet, role_arn: str, profile_name: str) -> str:
        """
        Save a new profile name for a role and re-render the profile commands.

        The credentials already issued are reused; STS is not called again.

        Returns:
            The profile-config export for the new name
        """
        self.preferences.set_profile_name(arns.preference_key(role_arn), profile_name)
        return render(PROFILE_CONFIG, credentials, profile_name)

    def select_format(self, format_id: str) -> None:
        """
        Remember the export format the user picked.

        Raises:
            UnknownExportFormatError: If format_id is not a known format
        """
        if format_id not in EXPORT_FORMATS:
            raise UnknownExportFormatError(format_id)
        self.preferences.set_last_format(format_id)
