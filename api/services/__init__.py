"""
Services for SAML parsing, role assumption, credential export and preferences.
"""
from config import settings
from api.services.credentials import CredentialBundle, CredentialService
from api.services.preferences import JsonFileStore, PreferenceStore
from api.services.sts import CredentialSet, SamlRoleExchange


def create_credential_service() -> CredentialService:
    """Build a CredentialService from the application settings."""
    return CredentialService(
        exchange=SamlRoleExchange(),
        preferences=PreferenceStore(JsonFileStore(settings.preferences_file)),
        duration_overrides=settings.duration_overrides
    )


__all__ = [
    'CredentialBundle',
    'CredentialService',
    'CredentialSet',
    'SamlRoleExchange',
    'PreferenceStore',
    'JsonFileStore',
    'create_credential_service'
]
