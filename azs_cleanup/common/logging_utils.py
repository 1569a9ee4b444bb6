"""
Logging configuration for the cleanup tool.

Quietens the Azure SDK's per-request HTTP logging unless verbose output
was asked for.
"""

import logging

AZURE_SDK_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "azure.mgmt",
    "urllib3",
)


def setup_logging(verbose: bool = False, default_level: str = "INFO", suppress_azure: bool = True) -> logging.Logger:
    """
    Set up logging configuration with consistent formatting.

    Args:
        verbose: Enable verbose (DEBUG) logging if True
        default_level: Logging level when verbose=False
        suppress_azure: Lower the Azure SDK and urllib3 loggers to WARNING

    Returns:
        Logger for the azs_cleanup package
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, default_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    if suppress_azure and not verbose:
        for name in AZURE_SDK_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("azs_cleanup")


def enable_verbose_logging() -> None:
    """
    Switch to DEBUG after logging was already set up.

    Used when verbose mode is only known once the credentials file has been
    read. Undoes the Azure SDK suppression done by setup_logging.
    """
    logging.getLogger().setLevel(logging.DEBUG)
    for name in AZURE_SDK_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
