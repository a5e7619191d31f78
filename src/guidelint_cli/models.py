from typing import List

from guidelint.models import Severity
from pydantic import BaseModel, ConfigDict, Field


class LintIssue(BaseModel):
    """Serializable issue as handed to reporters and CI annotations"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    path: str
    line: int
    column: int
    rule_id: str = Field(alias="ruleId")
    severity: Severity
    message: str


class LintReport(BaseModel):
    issues: List[LintIssue] = Field(default_factory=list)
    files_checked: int = Field(0, alias="filesChecked")
    files_failed: List[str] = Field(default_factory=list, alias="filesFailed")

    model_config = ConfigDict(populate_by_name=True)
