"""Engine package - Plans and executes the provisioning procedure."""

from server_setup.engine.executor import OperationExecutor
from server_setup.engine.runner import ProvisionRunner, validate_username

__all__ = ["OperationExecutor", "ProvisionRunner", "validate_username"]
