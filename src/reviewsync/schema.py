"""Typed records describing a Gerrit change and its approvals."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr


class GerritModel(BaseModel):
    """Base model for Gerrit payloads; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class ApprovalType(str, Enum):
    """Approval categories configured on the review server."""

    CODE_REVIEW = "Code-Review"
    INTEGRATION_APPROVAL = "Integration-Approval"
    CI_TESTING = "CI-Testing"
    SUBMIT = "SUBM"


# Types that never appear in a commit message, whatever their value.
EXCLUDED_TYPES = frozenset({ApprovalType.CI_TESTING, ApprovalType.SUBMIT})

# Rendering order of the approval block.
TYPE_ORDER = {
    ApprovalType.CODE_REVIEW: 0,
    ApprovalType.INTEGRATION_APPROVAL: 1,
}


class PatchSet(GerritModel):
    """The current patchset of a change."""

    number: int
    revision: StrictStr
    ref: StrictStr
    approvals: List[Any] = Field(default_factory=list)


class ChangeRecord(GerritModel):
    """Snapshot of one change as returned by ``gerrit query``."""

    project: StrictStr
    branch: StrictStr
    number: int
    commit_message: StrictStr = Field(alias="commitMessage")
    created_on: StrictInt = Field(alias="createdOn")
    open: StrictBool
    status: StrictStr = ""
    current_patch_set: PatchSet = Field(alias="currentPatchSet")

    @property
    def revision(self) -> str:
        return self.current_patch_set.revision

    @property
    def ref(self) -> str:
        return self.current_patch_set.ref

    @property
    def approvals(self) -> List[Any]:
        return list(self.current_patch_set.approvals)


class Reviewer(GerritModel):
    """Account that granted an approval."""

    name: StrictStr
    email: Optional[StrictStr] = None
    username: Optional[StrictStr] = None


class RawApproval(GerritModel):
    """Approval entry exactly as Gerrit reports it."""

    type: ApprovalType
    value: Optional[Union[StrictStr, StrictInt]] = None
    granted_on: Union[StrictInt, StrictFloat] = Field(alias="grantedOn")
    by: Reviewer


class ApprovalRecord(GerritModel):
    """Validated approval that may be rendered into a commit message."""

    type: ApprovalType
    name: str
    email: str
    value: str
    granted_on: Union[int, float]

    @property
    def is_plus_one(self) -> bool:
        return self.value in {"1", "+1"}

    @property
    def verb(self) -> str:
        return "Reviewed" if self.type == ApprovalType.CODE_REVIEW else "Approved"

    def render(self) -> str:
        """Return the commit-message line for this approval."""

        return f"{self.verb} by: {self.name} <{self.email}>"


__all__ = [
    "ApprovalRecord",
    "ApprovalType",
    "ChangeRecord",
    "EXCLUDED_TYPES",
    "GerritModel",
    "PatchSet",
    "RawApproval",
    "Reviewer",
    "TYPE_ORDER",
]
