from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class BranchSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    when: str = "true"  # guard expression, see guards.evaluate_condition
    steps: List["ElementSpec"] = Field(min_length=1)


class ElementSpec(BaseModel):
    """ One element of a sequence: a tool step, an agent step, or a branch point. """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    tool: Optional[str] = None
    agent: Optional[str] = None
    branches: Optional[Dict[str, BranchSpec]] = None
    mode: Literal["all", "first"] = "all"

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> "ElementSpec":
        kinds = [k for k in ("tool", "agent", "branches") if getattr(self, k) is not None]
        if len(kinds) != 1:
            raise ValueError("each element needs exactly one of 'tool', 'agent' or 'branches'")
        if self.branches is not None and not self.branches:
            raise ValueError("'branches' must declare at least one branch")
        return self


class WorkflowSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: Optional[str] = None
    steps: List[ElementSpec] = Field(min_length=1)


BranchSpec.model_rebuild()


class _UniqueKeyLoader(yaml.SafeLoader):
    """ SafeLoader that rejects duplicate mapping keys instead of keeping the last one. """

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                hash(key)
            except TypeError:
                raise ValueError(f"Unhashable mapping key {key!r} at line {key_node.start_mark.line + 1}")
            if key in seen:
                raise ValueError(f"Duplicate key {key!r} at line {key_node.start_mark.line + 1}")
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def parse_yaml(yaml_text: str) -> Any:
    return yaml.load(yaml_text, Loader=_UniqueKeyLoader)


def validate_workflow(raw: Dict[str, Any]) -> WorkflowSpec:
    """Validate a raw YAML dict against WorkflowSpec."""
    if not isinstance(raw, dict):
        raise ValueError("Workflow definition must be a YAML mapping")
    try:
        return WorkflowSpec.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"YAML validation error: {e}")
