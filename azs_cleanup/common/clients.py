"""
Management API clients pointed at an Azure Stack Hub ARM endpoint.

Azure Stack Hub only serves the API versions of its hybrid profile
(2020-09-01-hybrid), so both clients are pinned to them.
"""

from typing import Tuple

from azure.core.credentials import TokenCredential
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient

from .auth import token_scope
from .environment import EnvironmentDescriptor

# 2020-09-01-hybrid profile
STORAGE_API_VERSION = "2019-06-01"
RESOURCE_API_VERSION = "2019-10-01"


def create_management_clients(
    credential: TokenCredential,
    subscription_id: str,
    descriptor: EnvironmentDescriptor
) -> Tuple[StorageManagementClient, ResourceManagementClient]:
    """
    Build the storage and resource management clients.

    Both clients talk to the deployment's ARM endpoint, request tokens for
    its audience instead of public Azure's, and use the hybrid profile's
    API versions.

    Returns:
        Tuple of (storage client, resource client)
    """
    base_url = descriptor.resource_manager_endpoint_url
    scopes = [token_scope(descriptor)]

    storage_client = StorageManagementClient(
        credential,
        subscription_id,
        base_url=base_url,
        credential_scopes=scopes,
        api_version=STORAGE_API_VERSION
    )
    resource_client = ResourceManagementClient(
        credential,
        subscription_id,
        base_url=base_url,
        credential_scopes=scopes,
        api_version=RESOURCE_API_VERSION
    )
    return storage_client, resource_client
