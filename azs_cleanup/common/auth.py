"""
Service principal authentication against the Azure Stack Hub authority.
"""

import logging

from azure.core.exceptions import AzureError, ClientAuthenticationError
from azure.identity import ClientSecretCredential

from .environment import EnvironmentDescriptor, effective_tenant_id
from .errors import AuthenticationError

logger = logging.getLogger(__name__)


def token_scope(descriptor: EnvironmentDescriptor) -> str:
    """
    Scope for tokens accepted by the deployment's management endpoint.

    Args:
        descriptor: Environment descriptor

    Returns:
        '<audience>/.default'
    """
    audience = descriptor.active_directory_resource_id
    if audience.endswith("/"):
        return f"{audience}.default"
    return f"{audience}/.default"


def acquire_credential(
    client_id: str,
    client_secret: str,
    tenant_id: str,
    descriptor: EnvironmentDescriptor
) -> ClientSecretCredential:
    """
    Create a client secret credential and prove it by requesting one token.

    For ADFS authorities the tenant is replaced by 'adfs' and authority
    validation (instance discovery) is turned off.

    Args:
        client_id: Service principal application id
        client_secret: Service principal secret
        tenant_id: Configured tenant id
        descriptor: Environment descriptor holding the authority and audience

    Returns:
        A ClientSecretCredential that has already issued a token

    Raises:
        AuthenticationError: If the identity provider rejects the request
    """
    tenant = effective_tenant_id(descriptor, tenant_id)
    if tenant != tenant_id:
        logger.info("ADFS authority detected, using tenant 'adfs' without authority validation")

    logger.debug(
        f"Authenticating client {client_id} against {descriptor.active_directory_endpoint_url} "
        f"(tenant: {tenant}, validate authority: {descriptor.validate_authority})"
    )

    credential = ClientSecretCredential(
        tenant_id=tenant,
        client_id=client_id,
        client_secret=client_secret,
        authority=descriptor.active_directory_endpoint_url,
        disable_instance_discovery=not descriptor.validate_authority,
    )

    try:
        credential.get_token(token_scope(descriptor))
    except ClientAuthenticationError as e:
        credential.close()
        raise AuthenticationError(f"Authentication failed for client {client_id}: {e.message}") from e
    except AzureError as e:
        credential.close()
        raise AuthenticationError(f"Could not reach the authority for client {client_id}: {e}") from e

    logger.info("✓ Authenticated service principal")
    return credential
