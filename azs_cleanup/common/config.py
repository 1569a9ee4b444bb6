"""
Configuration loading for the cleanup tool.

Provides functions for:
- Reading the service principal and endpoint settings from the environment
- Overlaying them on an optional credentials.env file
- Parsing the resource group and storage account positional arguments
"""

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from dotenv import dotenv_values

from .errors import ConfigurationError, UsageError

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM = "azs-cleanup"
DEFAULT_ENV_FILE = "credentials.env"
ENV_FILE_VARIABLE = "AZS_CLEANUP_ENV_FILE"
SKIP_TLS_VERIFY_VARIABLE = "ARM_SKIP_TLS_VERIFY"
VERBOSE_VARIABLE = "AZS_CLEANUP_VERBOSE"

# Order matters: it is the order missing names are reported in.
REQUIRED_ENV_VARS = (
    "AZURE_CLIENT_ID",
    "AZURE_TENANT_ID",
    "ARM_ENDPOINT",
    "AZURE_CLIENT_SECRET",
    "AZURE_SUBSCRIPTION_ID",
)

TRUTHY_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CleanupConfig:
    """Everything the tool needs for one run. Built once at startup."""

    client_id: str
    tenant_id: str
    client_secret: str
    subscription_id: str
    base_url: str
    resource_group_name: str
    storage_account_name: str
    verify_tls: bool = True
    verbose: bool = False

    def __repr__(self) -> str:
        return (
            f"CleanupConfig(client_id={self.client_id!r}, tenant_id={self.tenant_id!r}, "
            f"client_secret={mask(self.client_secret)!r}, subscription_id={self.subscription_id!r}, "
            f"base_url={self.base_url!r}, resource_group_name={self.resource_group_name!r}, "
            f"storage_account_name={self.storage_account_name!r}, verify_tls={self.verify_tls}, "
            f"verbose={self.verbose})"
        )


def mask(value: str) -> str:
    """Hide all but the first and last four characters of a secret."""
    return f"{value[:4]}…{value[-4:]}" if value and len(value) > 8 else "****"


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY_VALUES


def resolve_env_file(environ: Mapping[str, str], env_file: Optional[Path] = None) -> Optional[Path]:
    """
    Find the credentials file to overlay, if any.

    An explicit path wins, then AZS_CLEANUP_ENV_FILE, then credentials.env in
    the current directory. Returns None when no such file exists.
    """
    if env_file is None:
        configured = environ.get(ENV_FILE_VARIABLE)
        env_file = Path(configured) if configured else Path.cwd() / DEFAULT_ENV_FILE

    env_file = Path(env_file)
    if env_file.is_file():
        return env_file
    return None


def merge_environment(environ: Mapping[str, str], env_file: Optional[Path] = None) -> Dict[str, str]:
    """
    Combine credentials file values with the process environment.

    Process environment variables take precedence over the file.
    """
    merged: Dict[str, str] = {}

    path = resolve_env_file(environ, env_file)
    if path is not None:
        logger.debug(f"Loading settings from {path}")
        for key, value in dotenv_values(path).items():
            if value:
                merged[key] = value

    for key, value in environ.items():
        if value:
            merged[key] = value

    return merged


def find_missing_variables(values: Mapping[str, str]) -> List[str]:
    return [name for name in REQUIRED_ENV_VARS if not values.get(name)]


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that reports bad arguments as UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(self.prog, detail=message)


def build_parser(program: str = DEFAULT_PROGRAM) -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog=program,
        description="Delete an Azure Stack Hub storage account and then its resource group",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Required environment variables:
  AZURE_CLIENT_ID, AZURE_TENANT_ID, AZURE_CLIENT_SECRET,
  AZURE_SUBSCRIPTION_ID, ARM_ENDPOINT

Optional environment variables:
  ARM_SKIP_TLS_VERIFY=true    # Skip certificate checks for the metadata endpoint
  AZS_CLEANUP_VERBOSE=true    # Enable debug logging
  AZS_CLEANUP_ENV_FILE=path   # Read settings from a dotenv file (default: ./credentials.env)

Example:
  %(prog)s my-resource-group mystorageaccount
        """
    )
    # Optional at the argparse level so a missing value becomes a UsageError
    parser.add_argument("resource_group_name", nargs="?", default=None,
                        help="Resource group to delete")
    parser.add_argument("storage_account_name", nargs="?", default=None,
                        help="Storage account to delete before the resource group")
    return parser


def parse_arguments(argv: Sequence[str], program: str = DEFAULT_PROGRAM) -> Tuple[str, str]:
    """
    Parse the resource group and storage account names.

    Raises:
        UsageError: If either name is missing or extra arguments are given
    """
    args = build_parser(program).parse_args(list(argv))
    if not args.resource_group_name or not args.storage_account_name:
        raise UsageError(program)
    return args.resource_group_name, args.storage_account_name


def load_config(
    argv: Sequence[str],
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
    program: str = DEFAULT_PROGRAM,
) -> CleanupConfig:
    """
    Validate the environment and arguments and build the run configuration.

    Both checks run before anything is raised. When both fail, the
    environment error is raised and the usage problem is logged.

    Args:
        argv: Command-line arguments without the program name
        environ: Environment mapping (defaults to os.environ)
        env_file: Explicit dotenv file to overlay
        program: Program name used in the usage message

    Returns:
        A frozen CleanupConfig

    Raises:
        ConfigurationError: If any required environment variable is missing
        UsageError: If either positional argument is missing or extras are given
    """
    if environ is None:
        environ = os.environ

    values = merge_environment(environ, env_file)
    missing = find_missing_variables(values)

    usage_error = None
    try:
        resource_group_name, storage_account_name = parse_arguments(argv, program)
    except UsageError as e:
        usage_error = e

    if missing:
        if usage_error is not None:
            logger.error(str(usage_error))
        raise ConfigurationError(missing)
    if usage_error is not None:
        raise usage_error

    return CleanupConfig(
        client_id=values["AZURE_CLIENT_ID"],
        tenant_id=values["AZURE_TENANT_ID"],
        client_secret=values["AZURE_CLIENT_SECRET"],
        subscription_id=values["AZURE_SUBSCRIPTION_ID"],
        base_url=values["ARM_ENDPOINT"],
        resource_group_name=resource_group_name,
        storage_account_name=storage_account_name,
        verify_tls=not is_truthy(values.get(SKIP_TLS_VERIFY_VARIABLE)),
        verbose=is_truthy(values.get(VERBOSE_VARIABLE)),
    )
