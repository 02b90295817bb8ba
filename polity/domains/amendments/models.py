# polity/domains/amendments/models.py
from typing import Optional

from pydantic import BaseModel

from polity.domains.amendments.workflow import (
    WorkflowStatus,
    get_default_workflow_status,
)
from polity.shared.permissions.types import Amendment


class WorkflowUpdate(BaseModel):
    workflow_status: WorkflowStatus


class AmendmentWorkflowResponse(BaseModel):
    id: str
    workflow_status: WorkflowStatus
    current_event_id: Optional[str]

    @classmethod
    def from_record(cls, amendment: Amendment) -> "AmendmentWorkflowResponse":
        return cls(
            id=amendment.id,
            workflow_status=amendment.workflow_status or get_default_workflow_status(),
            current_event_id=amendment.current_event_id,
        )
