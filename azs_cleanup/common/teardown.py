"""
Ordered teardown of a storage account and its resource group.

The storage account is deleted first. The resource group is only deleted
when that succeeded. Whatever happens, the run ends with a summary and the
command line to re-run, printed exactly once.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from azure.core.exceptions import ResourceNotFoundError

from .errors import OperationError

logger = logging.getLogger(__name__)

STORAGE_ACCOUNT = "storage account"
RESOURCE_GROUP = "resource group"


@dataclass
class TeardownResult:
    storage_account_deleted: bool = False
    resource_group_attempted: bool = False
    resource_group_deleted: bool = False
    errors: List[OperationError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.storage_account_deleted and self.resource_group_deleted and not self.errors


class TeardownSequencer:
    """
    Runs the two delete operations in order.

    Args:
        storage_client: StorageManagementClient (or anything with
            storage_accounts.delete)
        resource_client: ResourceManagementClient (or anything with
            resource_groups.begin_delete)
        resource_group_name: Resource group to delete
        storage_account_name: Storage account to delete first
        program: Program name shown in the re-run command
    """

    def __init__(self, storage_client, resource_client, resource_group_name: str,
                 storage_account_name: str, program: str = "azs-cleanup"):
        self.storage_client = storage_client
        self.resource_client = resource_client
        self.resource_group_name = resource_group_name
        self.storage_account_name = storage_account_name
        self.program = program

    @property
    def recovery_command(self) -> str:
        return f"{self.program} {self.resource_group_name} {self.storage_account_name}"

    def run(self) -> TeardownResult:
        """Delete the storage account, then the resource group, then report."""
        result = TeardownResult()
        try:
            result.storage_account_deleted = self.delete_storage_account(result)
            if result.storage_account_deleted:
                result.resource_group_attempted = True
                result.resource_group_deleted = self.delete_resource_group(result)
            else:
                logger.warning(
                    f"Skipping deletion of resource group '{self.resource_group_name}' "
                    "because the storage account was not deleted"
                )
        finally:
            self.finish(result)
        return result

    def delete_storage_account(self, result: TeardownResult) -> bool:
        logger.info(f"Deleting storage account : {self.storage_account_name}")
        try:
            self.storage_client.storage_accounts.delete(
                self.resource_group_name,
                self.storage_account_name
            )
        except ResourceNotFoundError:
            logger.warning(f"Storage account '{self.storage_account_name}' not found (may already be deleted)")
        except Exception as e:
            error = OperationError(STORAGE_ACCOUNT, self.storage_account_name, e)
            result.errors.append(error)
            logger.error(f"Error occurred in deleting the storage account: {self.storage_account_name}\n{e}")
            return False

        logger.info(f"✓ Successfully deleted the storage account: {self.storage_account_name}")
        logger.info("Deleting the resource group can take few minutes, so please be patient :).")
        return True

    def delete_resource_group(self, result: TeardownResult) -> bool:
        logger.info(f"Deleting resource group: {self.resource_group_name}")
        try:
            # Long-running operation
            poller = self.resource_client.resource_groups.begin_delete(self.resource_group_name)
            poller.result()
        except ResourceNotFoundError:
            logger.warning(f"Resource group '{self.resource_group_name}' not found (may already be deleted)")
        except Exception as e:
            error = OperationError(RESOURCE_GROUP, self.resource_group_name, e)
            result.errors.append(error)
            logger.error(f"Error occurred in deleting the resource group: {self.resource_group_name}\n{e}")
            return False

        logger.info(f"✓ Successfully deleted the resource group: {self.resource_group_name}")
        return True

    def finish(self, result: TeardownResult) -> None:
        """Print the closing banner, a summary and the re-run command."""
        print("\n" + "=" * 70)
        if result.succeeded:
            print("✓ CLEANUP COMPLETED SUCCESSFULLY")
        else:
            print("⚠ Error occurred in one of the operations.")
            for error in result.errors:
                print(f"  - {error}")
        print("=" * 70)
        print(f"  Storage account '{self.storage_account_name}': "
              f"{'deleted' if result.storage_account_deleted else 'NOT deleted'}")
        if result.resource_group_attempted:
            rg_status = "deleted" if result.resource_group_deleted else "NOT deleted"
        else:
            rg_status = "skipped"
        print(f"  Resource group '{self.resource_group_name}': {rg_status}")
        print("\n###### Exit ######\n")
        print(f"Please execute the following script for cleanup:\n{self.recovery_command}")
