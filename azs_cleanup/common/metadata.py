"""
Azure Stack Hub endpoint metadata discovery.

The management endpoint publishes the portal, gallery, graph and login
endpoints of the deployment at a well-known path. One unauthenticated GET
is enough to learn how to authenticate against it.
"""

import json
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import requests
from urllib3.exceptions import InsecureRequestWarning

from .errors import MalformedMetadataError, NetworkError, ParseError

logger = logging.getLogger(__name__)

METADATA_PATH = "metadata/endpoints?api-version=1.0"
USER_AGENT = "request"


@dataclass(frozen=True)
class EndpointMetadata:
    portal_endpoint: Optional[str]
    gallery_endpoint: Optional[str]
    graph_endpoint: Optional[str]
    login_endpoint: str
    audiences: Tuple[str, ...]
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


def metadata_url(base_url: str) -> str:
    """ARM_ENDPOINT is expected to end with '/'; nothing is inserted."""
    return f"{base_url}{METADATA_PATH}"


def parse_endpoint_metadata(payload: Any) -> EndpointMetadata:
    """
    Turn the decoded metadata document into EndpointMetadata.

    Raises:
        MalformedMetadataError: If the document is not an object or has no
            authentication.loginEndpoint
    """
    if not isinstance(payload, dict):
        raise MalformedMetadataError(f"Expected a JSON object, got {type(payload).__name__}")

    authentication = payload.get("authentication")
    if not isinstance(authentication, dict):
        raise MalformedMetadataError("Metadata has no 'authentication' section")

    login_endpoint = authentication.get("loginEndpoint")
    if not isinstance(login_endpoint, str) or not login_endpoint:
        raise MalformedMetadataError("Metadata has no 'authentication.loginEndpoint'")

    audiences = authentication.get("audiences") or []
    if not isinstance(audiences, list):
        raise MalformedMetadataError("'authentication.audiences' must be a list")

    return EndpointMetadata(
        portal_endpoint=payload.get("portalEndpoint"),
        gallery_endpoint=payload.get("galleryEndpoint"),
        graph_endpoint=payload.get("graphEndpoint"),
        login_endpoint=login_endpoint,
        audiences=tuple(audiences),
        raw=payload,
    )


def fetch_endpoint_metadata(
    base_url: str,
    verify_tls: bool = True,
    session: Optional[requests.Session] = None
) -> EndpointMetadata:
    """
    Fetch and parse the endpoint metadata of an Azure Stack Hub deployment.

    Single best-effort call: no retries and no timeout beyond the transport
    defaults.

    Args:
        base_url: ARM endpoint, ending with '/'
        verify_tls: Validate the server certificate (disable only for
            self-signed deployments)
        session: Optional requests session (a fresh one is used otherwise)

    Returns:
        Parsed EndpointMetadata

    Raises:
        NetworkError: On transport failure or a non-2xx response
        ParseError: If the body is not valid JSON
        MalformedMetadataError: If the JSON does not have the expected shape
    """
    url = metadata_url(base_url)
    headers = {"User-Agent": USER_AGENT}

    if not verify_tls:
        logger.warning(f"TLS certificate verification is disabled for {url}")

    logger.info(f"Fetching endpoint metadata from {url}")
    owns_session = session is None
    if owns_session:
        session = requests.Session()

    try:
        with warnings.catch_warnings():
            if not verify_tls:
                warnings.simplefilter("ignore", InsecureRequestWarning)
            response = session.get(url, headers=headers, verify=verify_tls)
    except requests.RequestException as e:
        raise NetworkError(url, cause=e) from e
    finally:
        if owns_session:
            session.close()

    if not response.ok:
        raise NetworkError(url, status_code=response.status_code)

    try:
        payload = json.loads(response.text)
    except ValueError as e:
        raise ParseError(f"Metadata response from {url} is not valid JSON: {e}") from e

    metadata = parse_endpoint_metadata(payload)
    logger.info("Initialized endpoint metadata")
    logger.debug(f"Endpoint metadata: {json.dumps(payload, indent=2)}")
    return metadata
