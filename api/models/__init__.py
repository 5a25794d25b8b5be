"""
Pydantic models for request/response validation.
"""
from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field


# Credential Models
class CredentialRequest(BaseModel):
    """Credential request model."""
    saml_response: str = Field(..., description="Base64 encoded SAMLResponse from the identity provider")
    role_arn: str = Field(..., min_length=1, description="ARN of the selected role (the roleIndex form value)")


class RolesRequest(BaseModel):
    """Role listing request model."""
    saml_response: str = Field(..., description="Base64 encoded SAMLResponse from the identity provider")


class RoleInfo(BaseModel):
    """A role the SAML assertion allows."""
    role_arn: str
    principal_arn: str
    account_id: str
    role_name: str


class RolesResponse(BaseModel):
    """Role listing response model."""
    count: int
    roles: List[RoleInfo]


class CredentialsModel(BaseModel):
    """Temporary AWS credentials."""
    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime


class CredentialResponse(BaseModel):
    """Credential response model."""
    role_arn: str
    account_id: str
    role_name: str
    profile_name: str
    credentials: CredentialsModel
    exports: Dict[str, str] = Field(..., description="Rendered text for each export format")
    selected_format: str | None = Field(None, description="Export format the user last selected")


class ProfileRequest(BaseModel):
    """Profile rename request model."""
    role_arn: str = Field(..., description="ARN of the role the credentials belong to")
    profile_name: str = Field(..., min_length=1, description="New AWS CLI profile name")
    credentials: CredentialsModel


class ProfileResponse(BaseModel):
    """Profile rename response model."""
    profile_name: str
    profile_config: str


class FormatPreference(BaseModel):
    """Export format preference model."""
    format: str | None = Field(None, description="Export format identifier")


# Common Models
class ErrorResponse(BaseModel):
    """Error response model."""
    detail: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    app_name: str
    version: str
    environment: str
