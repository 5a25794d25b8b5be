"""
Render temporary credentials as commands and values users can paste.

Values are inserted literally between double quotes; access keys, secrets and
session tokens never contain quotes.
"""
from typing import Callable, Dict

from api.services.exceptions import UnknownExportFormatError
from api.services.sts import CredentialSet


SHELL_EXPORT = "shell-export"
WINDOWS_BATCH = "windows-batch"
POWERSHELL = "powershell"
PROFILE_CONFIG = "profile-config"
RAW_FIELDS = "raw-fields"


def render_shell_export(credentials: CredentialSet, profile_name: str) -> str:
    """MacOS or Linux environment variables."""
    return (
        f'export AWS_ACCESS_KEY_ID="{credentials.access_key_id}"\n'
        f'export AWS_SECRET_ACCESS_KEY="{credentials.secret_access_key}"\n'
        f'export AWS_SESSION_TOKEN="{credentials.session_token}"'
    )


def render_windows_batch(credentials: CredentialSet, profile_name: str) -> str:
    """Windows CMD environment variables."""
    return (
        f'set AWS_ACCESS_KEY_ID="{credentials.access_key_id}"\n'
        f'set AWS_SECRET_ACCESS_KEY="{credentials.secret_access_key}"\n'
        f'set AWS_SESSION_TOKEN="{credentials.session_token}"'
    )


def render_powershell(credentials: CredentialSet, profile_name: str) -> str:
    """A single AWS Tools for PowerShell command, continued with backticks."""
    return (
        f'Set-AWSCredential -AccessKey "{credentials.access_key_id}" `\n'
        f'-SecretKey "{credentials.secret_access_key}" `\n'
        f'-SessionToken "{credentials.session_token}"'
    )


def render_profile_config(credentials: CredentialSet, profile_name: str) -> str:
    """AWS CLI commands that write a named profile to ~/.aws/credentials."""
    return (
        f'aws configure set profile.{profile_name}.aws_access_key_id "{credentials.access_key_id}"\n'
        f'aws configure set profile.{profile_name}.aws_secret_access_key "{credentials.secret_access_key}"\n'
        f'aws configure set profile.{profile_name}.aws_session_token "{credentials.session_token}"'
    )


def render_raw_fields(credentials: CredentialSet, profile_name: str) -> str:
    """The individual values, for pasting into a service client."""
    return "\n".join([
        credentials.access_key_id,
        credentials.secret_access_key,
        credentials.session_token,
    ])


# Order matters: the last selected format is persisted as an index into this table
EXPORT_FORMATS: Dict[str, Callable[[CredentialSet, str], str]] = {
    SHELL_EXPORT: render_shell_export,
    WINDOWS_BATCH: render_windows_batch,
    POWERSHELL: render_powershell,
    PROFILE_CONFIG: render_profile_config,
    RAW_FIELDS: render_raw_fields,
}


def render(format_id: str, credentials: CredentialSet, profile_name: str) -> str:
    """
    Render credentials in one export format.

    Args:
        format_id: One of the EXPORT_FORMATS keys
        credentials: Temporary credentials
        profile_name: Profile name, used by the profile-config format

    Returns:
        The rendered text, lines separated by newlines

    Raises:
        UnknownExportFormatError: If format_id is not a known format
    """
    renderer = EXPORT_FORMATS.get(format_id)
    if renderer is None:
        raise UnknownExportFormatError(format_id)
    return renderer(credentials, profile_name)


def render_all(credentials: CredentialSet, profile_name: str) -> Dict[str, str]:
    """Render credentials in every export format."""
    return {
        format_id: renderer(credentials, profile_name)
        for format_id, renderer in EXPORT_FORMATS.items()
    }
