"""Multi-step flows shared by the scenario tests"""

from .shared_steps import SharedSteps
from .workflow_helper import WorkflowHelper

__all__ = [
    'SharedSteps',
    'WorkflowHelper',
]
