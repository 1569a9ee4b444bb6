"""
Derivation of the Azure Stack Hub cloud environment from endpoint metadata.

Everything here is a pure function of the metadata document and the ARM
endpoint, so the same inputs always produce the same descriptor.
"""

from dataclasses import dataclass

from .errors import MalformedMetadataError
from .metadata import EndpointMetadata

ENVIRONMENT_NAME = "AzureStack"
ADFS_SUFFIX = "adfs"
ADFS_TENANT = "adfs"


@dataclass(frozen=True)
class EnvironmentDescriptor:
    name: str
    portal_url: str
    resource_manager_endpoint_url: str
    gallery_endpoint_url: str
    active_directory_endpoint_url: str
    active_directory_resource_id: str
    active_directory_graph_resource_id: str
    storage_endpoint_suffix: str
    key_vault_dns_suffix: str
    management_endpoint_url: str
    is_adfs_authority: bool
    validate_authority: bool


def authority_endpoint(login_endpoint: str) -> str:
    """Cut the login endpoint after its last '/', keeping the slash."""
    index = login_endpoint.rfind("/")
    if index < 0:
        raise MalformedMetadataError(f"Login endpoint '{login_endpoint}' contains no '/'")
    return login_endpoint[:index + 1]


def domain_suffix(base_url: str) -> str:
    """The part of the ARM endpoint from its first '.' onwards, e.g. '.contoso.net/'."""
    index = base_url.find(".")
    if index < 0:
        raise MalformedMetadataError(f"ARM endpoint '{base_url}' has no domain suffix")
    return base_url[index:]


def build_environment(metadata: EndpointMetadata, base_url: str) -> EnvironmentDescriptor:
    """
    Build the environment descriptor for an Azure Stack Hub deployment.

    Args:
        metadata: Parsed endpoint metadata
        base_url: ARM endpoint the metadata was fetched from

    Returns:
        EnvironmentDescriptor

    Raises:
        MalformedMetadataError: If there is no audience, the login endpoint
            has no '/', or the ARM endpoint has no '.'
    """
    if not metadata.audiences:
        raise MalformedMetadataError("Metadata lists no authentication audiences")

    audience = metadata.audiences[0]
    suffix = domain_suffix(base_url)
    is_adfs = metadata.login_endpoint.endswith(ADFS_SUFFIX)

    return EnvironmentDescriptor(
        name=ENVIRONMENT_NAME,
        portal_url=metadata.portal_endpoint or "",
        resource_manager_endpoint_url=base_url,
        gallery_endpoint_url=metadata.gallery_endpoint or "",
        active_directory_endpoint_url=authority_endpoint(metadata.login_endpoint),
        active_directory_resource_id=audience,
        active_directory_graph_resource_id=metadata.graph_endpoint or "",
        storage_endpoint_suffix=suffix,
        key_vault_dns_suffix=".vault" + suffix,
        management_endpoint_url=audience,
        is_adfs_authority=is_adfs,
        validate_authority=not is_adfs,
    )


def effective_tenant_id(descriptor: EnvironmentDescriptor, tenant_id: str) -> str:
    """ADFS authorities always use the literal 'adfs' tenant."""
    if descriptor.is_adfs_authority:
        return ADFS_TENANT
    return tenant_id
