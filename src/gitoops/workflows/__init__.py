"""Workflow executors, one per command, sharing one state machine."""

from gitoops.workflows.base import (
    ConfirmFn,
    Outcome,
    OutcomeStatus,
    Workflow,
    WorkflowContext,
)
from gitoops.workflows.fixup import FixupWorkflow
from gitoops.workflows.pocket import (
    PocketRestoreWorkflow,
    PocketSaveWorkflow,
    list_pockets,
)
from gitoops.workflows.revert_merge import RevertMergeWorkflow
from gitoops.workflows.save import SaveWorkflow
from gitoops.workflows.split import SplitWorkflow
from gitoops.workflows.undo import UndoWorkflow
from gitoops.workflows.wrong_branch import WrongBranchWorkflow
from gitoops.workflows.yank import YankWorkflow

__all__ = [
    "ConfirmFn",
    "FixupWorkflow",
    "Outcome",
    "OutcomeStatus",
    "PocketRestoreWorkflow",
    "PocketSaveWorkflow",
    "RevertMergeWorkflow",
    "SaveWorkflow",
    "SplitWorkflow",
    "UndoWorkflow",
    "Workflow",
    "WorkflowContext",
    "WrongBranchWorkflow",
    "YankWorkflow",
    "list_pockets",
]
