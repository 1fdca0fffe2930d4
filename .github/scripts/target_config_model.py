#!/usr/bin/env python3

"""
Merge Target Configuration Model
--------------------------------
Pydantic models describing the `github` and `merge` sections of the merge
configuration file consumed by the target branch scripts.

Example configuration:

    {
        "github": {"owner": "ROCm", "name": "rocm-libraries", "mainBranchName": "main"},
        "merge": {
            "noTargetLabeling": false,
            "releaseBranches": {"latest": "10.1.x", "lts": ["9.2.x", "8.4.x"]},
            "targetLabels": {
                "target: major": {"branch": "{main}"},
                "target: minor": {"followBaseBranch": true, "alsoMergeInto": ["{main}"]},
                "target: lts": {"followBaseBranch": true, "allowedBaseBranches": ["*.x"], "alsoMergeInto": ["{lts}"]}
            }
        }
    }

Branch names in a rule may be literal names or one of the references
`{main}`, `{base}`, `{next}`, `{latest}` and `{lts}`.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

class GithubConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    owner: str
    name: str
    main_branch_name: str = Field("main", alias="mainBranchName")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

class BranchRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    branch: Optional[str] = None
    follow_base_branch: bool = Field(False, alias="followBaseBranch")
    also_merge_into: List[str] = Field(default_factory=list, alias="alsoMergeInto")
    allowed_base_branches: List[str] = Field(default_factory=list, alias="allowedBaseBranches")

    @model_validator(mode="after")
    def _check_primary_target(self) -> "BranchRule":
        if bool(self.branch) == self.follow_base_branch:
            raise ValueError("a branch rule needs exactly one of 'branch' or 'followBaseBranch'")
        return self

class ReleaseBranches(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    next: Optional[str] = None
    latest: Optional[str] = None
    lts: List[str] = Field(default_factory=list)

class MergeConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    no_target_labeling: bool = Field(False, alias="noTargetLabeling")
    target_labels: Dict[str, BranchRule] = Field(default_factory=dict, alias="targetLabels")
    release_branches: Optional[ReleaseBranches] = Field(None, alias="releaseBranches")

    @model_validator(mode="after")
    def _check_target_labels(self) -> "MergeConfig":
        if not self.no_target_labeling and not self.target_labels:
            raise ValueError("'targetLabels' must not be empty unless 'noTargetLabeling' is set")
        return self

class TargetingConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    github: GithubConfig
    merge: MergeConfig
