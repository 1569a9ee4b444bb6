"""Azure Stack Hub storage account and resource group cleanup."""

__version__ = "0.1.0"
