#!/usr/bin/env python3
"""
Azure Stack Hub cleanup - delete a storage account and its resource group.

Discovers the deployment's endpoints from ARM_ENDPOINT, authenticates the
service principal from the environment, deletes the storage account and,
if that worked, the resource group.

Usage:
    azs-cleanup <resourceGroupName> <storageAccountName>

    # From a checkout:
    python cleanup.py <resourceGroupName> <storageAccountName>

Examples:
    export AZURE_CLIENT_ID=... AZURE_TENANT_ID=... AZURE_CLIENT_SECRET=...
    export AZURE_SUBSCRIPTION_ID=... ARM_ENDPOINT=https://management.local.azurestack.external/
    azs-cleanup my-resource-group mystorageaccount
    # → On any failure, re-run the same command; finished steps are skipped
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .common.auth import acquire_credential
from .common.clients import create_management_clients
from .common.config import DEFAULT_PROGRAM, VERBOSE_VARIABLE, CleanupConfig, is_truthy, load_config
from .common.environment import build_environment
from .common.errors import CleanupError, ConfigurationError, UsageError
from .common.logging_utils import enable_verbose_logging, setup_logging
from .common.metadata import fetch_endpoint_metadata
from .common.teardown import TeardownSequencer

logger = logging.getLogger(__name__)


def program_name(argv0: Optional[str] = None) -> str:
    """Name to show in usage and re-run messages."""
    if not argv0:
        return DEFAULT_PROGRAM
    name = Path(argv0).name
    if name.endswith(".py"):
        return f"python {name}"
    return name or DEFAULT_PROGRAM


def run_cleanup(config: CleanupConfig, program: str = DEFAULT_PROGRAM, session=None) -> int:
    """
    Run discovery, authentication and teardown for a loaded configuration.

    Args:
        config: Validated configuration
        program: Program name for the re-run command
        session: Optional requests session for the metadata fetch

    Returns:
        Exit code (0 when both resources were deleted, 1 otherwise)

    Raises:
        CleanupError: If metadata discovery or authentication fails
    """
    metadata = fetch_endpoint_metadata(config.base_url, verify_tls=config.verify_tls, session=session)
    descriptor = build_environment(metadata, config.base_url)
    logger.debug(f"Environment: {descriptor}")

    credential = acquire_credential(
        config.client_id,
        config.client_secret,
        config.tenant_id,
        descriptor
    )

    try:
        storage_client, resource_client = create_management_clients(
            credential,
            config.subscription_id,
            descriptor
        )

        print("\n" + "=" * 70)
        print("CLEANING UP AZURE STACK HUB RESOURCES")
        print("=" * 70)

        sequencer = TeardownSequencer(
            storage_client,
            resource_client,
            config.resource_group_name,
            config.storage_account_name,
            program=program
        )
        result = sequencer.run()
    finally:
        credential.close()

    return 0 if result.succeeded else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the cleanup tool."""
    program = program_name(sys.argv[0] if argv is None else None)
    if argv is None:
        argv = sys.argv[1:]

    setup_logging(verbose=is_truthy(os.environ.get(VERBOSE_VARIABLE)))

    try:
        config = load_config(argv, program=program)
    except (ConfigurationError, UsageError) as e:
        logger.error(str(e))
        return 1

    if config.verbose:
        enable_verbose_logging()
    logger.debug(f"Configuration: {config!r}")

    try:
        return run_cleanup(config, program=program)
    except CleanupError as e:
        logger.error(str(e))
        print("\nNo resources were deleted. Fix the problem above and run:")
        print(f"  {program} {config.resource_group_name} {config.storage_account_name}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error during cleanup: {e}")
        import traceback
        logger.debug(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
