"""Test derivation of the Azure Stack Hub environment descriptor."""

import pytest

from azs_cleanup.common.environment import build_environment, effective_tenant_id
from azs_cleanup.common.errors import MalformedMetadataError
from azs_cleanup.common.metadata import parse_endpoint_metadata
from testing.conftest import make_metadata_payload


def test_adfs_login_endpoint():
    metadata = parse_endpoint_metadata(make_metadata_payload("https://login.example.com/adfs", ["aud1"]))

    descriptor = build_environment(metadata, "https://mgmt.example.com/")

    assert descriptor.is_adfs_authority is True
    assert descriptor.validate_authority is False
    assert descriptor.active_directory_endpoint_url == "https://login.example.com/"
    assert descriptor.active_directory_resource_id == "aud1"
    assert descriptor.management_endpoint_url == "aud1"
    assert effective_tenant_id(descriptor, "configured-tenant") == "adfs"


def test_azure_ad_login_endpoint(aad_metadata):
    metadata = parse_endpoint_metadata(aad_metadata)

    descriptor = build_environment(metadata, "https://management.local.azurestack.external/")

    assert descriptor.is_adfs_authority is False
    assert descriptor.validate_authority is True
    assert descriptor.active_directory_endpoint_url == "https://login.microsoftonline.com/"
    assert effective_tenant_id(descriptor, "configured-tenant") == "configured-tenant"


def test_domain_suffixes_come_from_arm_endpoint():
    metadata = parse_endpoint_metadata(make_metadata_payload("https://login.contoso.net/tenant", ["aud"]))

    descriptor = build_environment(metadata, "https://mgmt.contoso.net/")

    assert descriptor.storage_endpoint_suffix == ".contoso.net/"
    assert descriptor.key_vault_dns_suffix == ".vault.contoso.net/"


def test_descriptor_copies_endpoints(adfs_metadata):
    metadata = parse_endpoint_metadata(adfs_metadata)
    base_url = "https://management.local.azurestack.external/"

    descriptor = build_environment(metadata, base_url)

    assert descriptor.name == "AzureStack"
    assert descriptor.resource_manager_endpoint_url == base_url
    assert descriptor.portal_url == adfs_metadata["portalEndpoint"]
    assert descriptor.gallery_endpoint_url == adfs_metadata["galleryEndpoint"]
    assert descriptor.active_directory_graph_resource_id == adfs_metadata["graphEndpoint"]


def test_adfs_detection_is_a_literal_suffix_match():
    metadata = parse_endpoint_metadata(make_metadata_payload("https://login.example.com/adfs/", ["aud"]))

    descriptor = build_environment(metadata, "https://mgmt.example.com/")

    assert descriptor.is_adfs_authority is False
    assert descriptor.active_directory_endpoint_url == "https://login.example.com/adfs/"


def test_same_inputs_give_identical_descriptors(adfs_metadata):
    base_url = "https://management.local.azurestack.external/"

    first = build_environment(parse_endpoint_metadata(adfs_metadata), base_url)
    second = build_environment(parse_endpoint_metadata(adfs_metadata), base_url)

    assert first == second
    assert repr(first) == repr(second)


def test_empty_audiences_are_rejected():
    metadata = parse_endpoint_metadata(make_metadata_payload("https://login.example.com/adfs", []))

    with pytest.raises(MalformedMetadataError):
        build_environment(metadata, "https://mgmt.example.com/")


def test_login_endpoint_without_slash_is_rejected():
    metadata = parse_endpoint_metadata(make_metadata_payload("adfs", ["aud"]))

    with pytest.raises(MalformedMetadataError):
        build_environment(metadata, "https://mgmt.example.com/")


def test_arm_endpoint_without_domain_is_rejected():
    metadata = parse_endpoint_metadata(make_metadata_payload("https://login.example.com/adfs", ["aud"]))

    with pytest.raises(MalformedMetadataError):
        build_environment(metadata, "http://localhost/")
