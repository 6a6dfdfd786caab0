"""Actions package - Action layer with explicit contracts.

Each action declares:
- read_only: Whether it modifies the target server
- requires_backup: Whether backup is mandatory
- rollback_support: Whether it can undo changes
- prerequisites: What must pass before action runs
"""

from server_setup.actions.generate import GenerateAction
from server_setup.actions.report import ReportAction

__all__ = ["GenerateAction", "ReportAction"]
