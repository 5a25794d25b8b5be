"""
STS service for exchanging a SAML assertion for temporary credentials.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from config import settings
from api.services.exceptions import ExchangeError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialSet:
    """Temporary AWS credentials returned by AssumeRoleWithSAML."""
    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime


class SamlRoleExchange:
    """AWS STS AssumeRoleWithSAML client."""

    def __init__(self, region: str | None = None, endpoint_url: str | None = None):
        self.region = region or settings.aws_region
        self.endpoint_url = endpoint_url or settings.sts_endpoint_url

        # AssumeRoleWithSAML is an unsigned call, so no caller credentials are needed.
        # Failures go straight back to the user; botocore must not retry them.
        self.client = boto3.client(
            'sts',
            region_name=self.region,
            endpoint_url=self.endpoint_url,
            config=Config(retries={'max_attempts': 1, 'mode': 'standard'})
        )

    def _assume_role_with_saml(
        self,
        principal_arn: str,
        role_arn: str,
        encoded_assertion: str,
        duration: int
    ) -> CredentialSet:
        try:
            response = self.client.assume_role_with_saml(
                PrincipalArn=principal_arn,
                RoleArn=role_arn,
                SAMLAssertion=encoded_assertion,
                DurationSeconds=duration
            )
        except ClientError as e:
            error = e.response.get('Error', {})
            message = error.get('Message') or str(e)
            logger.error(f"AssumeRoleWithSAML failed for {role_arn}: {error.get('Code')} - {message}")
            raise ExchangeError(message, code=error.get('Code')) from e
        except BotoCoreError as e:
            logger.error(f"AssumeRoleWithSAML failed for {role_arn}: {e}")
            raise ExchangeError(str(e)) from e

        try:
            credentials = response['Credentials']
            return CredentialSet(
                access_key_id=credentials['AccessKeyId'],
                secret_access_key=credentials['SecretAccessKey'],
                session_token=credentials['SessionToken'],
                expiration=credentials['Expiration']
            )
        except KeyError as e:
            raise ExchangeError(f"Incomplete credentials in STS response: missing {e}") from e

    async def assume_role(
        self,
        principal_arn: str,
        role_arn: str,
        encoded_assertion: str,
        duration: int
    ) -> CredentialSet:
        """
        Request temporary credentials for a role.

        Args:
            principal_arn: ARN of the SAML identity provider
            role_arn: ARN of the role to assume
            encoded_assertion: Base64 encoded SAMLResponse, passed through unchanged
            duration: Requested session duration in seconds

        Returns:
            The temporary credentials

        Raises:
            ExchangeError: If STS rejects the request; carries the STS message verbatim
        """
        logger.info(f"Requesting credentials for {role_arn} ({duration}s)")
        return await asyncio.to_thread(
            self._assume_role_with_saml,
            principal_arn,
            role_arn,
            encoded_assertion,
            duration
        )
