"""
Credential and preference routes.
"""
from fastapi import APIRouter, Depends, status

from api.models import (
    CredentialRequest, CredentialResponse, CredentialsModel, RolesRequest,
    RolesResponse, RoleInfo, ProfileRequest, ProfileResponse, FormatPreference,
    ErrorResponse
)
from api.services import CredentialService, CredentialSet, create_credential_service
from api.services import arns

router = APIRouter(tags=["Credentials"])

_credential_service: CredentialService | None = None


def get_credential_service() -> CredentialService:
    """Get the shared credential service, creating it on first use."""
    global _credential_service
    if _credential_service is None:
        _credential_service = create_credential_service()
    return _credential_service


@router.post(
    "/credentials",
    response_model=CredentialResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed SAML assertion"},
        404: {"model": ErrorResponse, "description": "Role not found in SAML assertion"},
        502: {"model": ErrorResponse, "description": "STS rejected the request"}
    }
)
async def get_credentials(
    request: CredentialRequest,
    service: CredentialService = Depends(get_credential_service)
):
    """
    Assume the selected role with the SAML assertion.

    Returns temporary credentials and every export format.
    """
    bundle = await service.get_credentials(
        saml_response=request.saml_response,
        role_arn=request.role_arn
    )
    return CredentialResponse(
        role_arn=bundle.role_arn,
        account_id=bundle.account_id,
        role_name=bundle.role_name,
        profile_name=bundle.profile_name,
        credentials=CredentialsModel(
            access_key_id=bundle.credentials.access_key_id,
            secret_access_key=bundle.credentials.secret_access_key,
            session_token=bundle.credentials.session_token,
            expiration=bundle.credentials.expiration
        ),
        exports=bundle.exports,
        selected_format=bundle.selected_format
    )


@router.post(
    "/credentials/roles",
    response_model=RolesResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed SAML assertion"}
    }
)
async def list_roles(
    request: RolesRequest,
    service: CredentialService = Depends(get_credential_service)
):
    """List the roles the SAML assertion allows."""
    roles = [
        RoleInfo(
            role_arn=entry.role_arn,
            principal_arn=entry.principal_arn,
            account_id=arns.account_id(entry.role_arn),
            role_name=arns.role_name(entry.role_arn)
        )
        for entry in service.list_roles(request.saml_response)
    ]
    return RolesResponse(count=len(roles), roles=roles)


@router.post(
    "/credentials/profile",
    response_model=ProfileResponse
)
async def rename_profile(
    request: ProfileRequest,
    service: CredentialService = Depends(get_credential_service)
):
    """
    Change the AWS CLI profile name for a role.

    Re-renders the profile commands for credentials already issued,
    without calling STS again.
    """
    credentials = CredentialSet(
        access_key_id=request.credentials.access_key_id,
        secret_access_key=request.credentials.secret_access_key,
        session_token=request.credentials.session_token,
        expiration=request.credentials.expiration
    )
    profile_config = service.rename_profile(credentials, request.role_arn, request.profile_name)
    return ProfileResponse(profile_name=request.profile_name, profile_config=profile_config)


@router.get(
    "/preferences/format",
    response_model=FormatPreference,
    tags=["Preferences"]
)
async def get_format_preference(
    service: CredentialService = Depends(get_credential_service)
):
    """Get the export format the user last selected."""
    return FormatPreference(format=service.preferences.get_last_format())


@router.put(
    "/preferences/format",
    response_model=FormatPreference,
    tags=["Preferences"],
    responses={
        400: {"model": ErrorResponse, "description": "Unknown export format"}
    }
)
async def set_format_preference(
    request: FormatPreference,
    service: CredentialService = Depends(get_credential_service)
):
    """Remember the export format the user selected."""
    service.select_format(request.format or "")
    return FormatPreference(format=request.format)
