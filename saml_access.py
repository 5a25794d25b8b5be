"""
Script to generate temporary AWS access keys from an AWS sign-in SAML assertion.

Reads the base64 SAMLResponse that the identity provider posts to
https://signin.aws.amazon.com/saml, assumes the selected role with
sts:AssumeRoleWithSAML and prints the credentials in a pasteable format.
"""
import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from types import MappingProxyType

from config import settings
from api.services import CredentialBundle, CredentialService, JsonFileStore, PreferenceStore, SamlRoleExchange
from api.services.exceptions import SamlAccessError
from api.services.exports import EXPORT_FORMATS, POWERSHELL, PROFILE_CONFIG, SHELL_EXPORT, WINDOWS_BATCH


TEXT_FORMAT = "text"
JSON_FORMAT = "json"


def read_saml_response(path: str) -> str:
    """Read the SAMLResponse from a file, or from stdin when path is '-'."""
    if path == "-":
        return sys.stdin.read().strip()
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip()


def print_credentials(bundle: CredentialBundle, format: str = TEXT_FORMAT) -> None:
    """
    Print the temporary credentials in various formats.

    Args:
        bundle: Credentials and pre-rendered exports
        format: 'text', 'json', or one of the export formats
    """
    credentials = bundle.credentials

    if format == JSON_FORMAT:
        print(json.dumps({
            "AccessKeyId": credentials.access_key_id,
            "SecretAccessKey": credentials.secret_access_key,
            "SessionToken": credentials.session_token,
            "Expiration": credentials.expiration.isoformat(),
            "RoleArn": bundle.role_arn,
            "ProfileName": bundle.profile_name,
        }, indent=2))

    elif format in bundle.exports:
        print(bundle.exports[format])

    else:  # text format
        expire_time = credentials.expiration.astimezone().strftime("%X")
        print("=" * 80)
        print(f"AWS Credentials for {bundle.role_name}")
        print(f"Credentials will expire at {expire_time}")
        print("=" * 80)
        print("\nOption 1: Set AWS environment variables")
        print("\n# MacOS or Linux")
        print(bundle.exports[SHELL_EXPORT])
        print("\n# Windows CMD")
        print(bundle.exports[WINDOWS_BATCH])
        print("\n# PowerShell")
        print(bundle.exports[POWERSHELL])
        print(f"\nOption 2: Add a profile to your AWS credentials file (profile: {bundle.profile_name})\n")
        print(bundle.exports[PROFILE_CONFIG])
        print("\nOption 3: Use individual values in your AWS service client\n")
        print(f"AWS Access Key Id:     {credentials.access_key_id}")
        print(f"AWS Secret Access Key: {credentials.secret_access_key}")
        print(f"AWS Session Token:     {credentials.session_token}")
        print("=" * 80)


def choose_role(service: CredentialService, saml_response: str, role_arn: str | None) -> str:
    """Get the role to assume, defaulting to the only role in the assertion."""
    if role_arn:
        return role_arn

    roles = service.list_roles(saml_response)
    if len(roles) == 1:
        return roles[0].role_arn

    available = "\n  ".join(entry.role_arn for entry in roles) or "(none)"
    raise SamlAccessError(f"Select a role to assume. Roles in the SAML assertion:\n  {available}")


def main(argv=None):
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(
        description="Generate temporary AWS access keys from a SAML assertion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the roles in a saved SAMLResponse
  python saml_access.py --saml-file saml.txt --list-roles

  # Assume a role and print every option
  python saml_access.py arn:aws:iam::123456789012:role/MyRole --saml-file saml.txt

  # Set environment variables in the current shell
  eval "$(python saml_access.py arn:aws:iam::123456789012:role/MyRole --saml-file saml.txt --format shell-export)"

  # Write a named profile to ~/.aws/credentials
  python saml_access.py arn:aws:iam::123456789012:role/MyRole --saml-file saml.txt \\
    --format profile-config --profile-name dev | sh

  # Read the SAMLResponse from stdin with a 4 hour session
  pbpaste | python saml_access.py arn:aws:iam::123456789012:role/MyRole --duration 14400
        """
    )

    parser.add_argument(
        "role_arn",
        nargs="?",
        help="The ARN of the IAM role to assume (default: the only role in the assertion)"
    )

    parser.add_argument(
        "--saml-file",
        default="-",
        help="File holding the base64 SAMLResponse (default: read from stdin)"
    )

    parser.add_argument(
        "--list-roles",
        action="store_true",
        help="List the roles in the SAML assertion and exit"
    )

    parser.add_argument(
        "--format",
        choices=[TEXT_FORMAT, JSON_FORMAT, *EXPORT_FORMATS],
        help="Output format (default: last export format used, or text)"
    )

    parser.add_argument(
        "--profile-name",
        help="AWS CLI profile name for profile-config (remembered per role)"
    )

    parser.add_argument(
        "--duration",
        type=int,
        help="Session duration in seconds, overriding the SAML assertion (900-43200)"
    )

    parser.add_argument(
        "--region",
        help="AWS region for STS (default: from AWS_REGION setting or us-east-1)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    preferences = PreferenceStore(JsonFileStore(settings.preferences_file))
    service = CredentialService(
        exchange=SamlRoleExchange(region=args.region),
        preferences=preferences,
        duration_overrides=settings.duration_overrides
    )

    try:
        saml_response = read_saml_response(args.saml_file)

        if args.list_roles:
            for entry in service.list_roles(saml_response):
                print(f"{entry.role_arn}\t{entry.principal_arn}")
            return 0

        role_arn = choose_role(service, saml_response, args.role_arn)
        if args.duration is not None:
            service.duration_overrides = MappingProxyType(
                {**settings.duration_overrides, role_arn: args.duration}
            )

        bundle = asyncio.run(service.get_credentials(saml_response, role_arn))

        if args.profile_name:
            profile_config = service.rename_profile(bundle.credentials, role_arn, args.profile_name)
            bundle = replace(
                bundle,
                profile_name=args.profile_name,
                exports={**bundle.exports, PROFILE_CONFIG: profile_config}
            )

        if args.format in EXPORT_FORMATS:
            service.select_format(args.format)
        output_format = args.format or bundle.selected_format or TEXT_FORMAT

        print_credentials(bundle, format=output_format)
        return 0

    except (SamlAccessError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
