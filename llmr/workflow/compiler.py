""" Load workflow graphs from YAML. """

from typing import Any, List, Mapping, Optional, Union

from .builder import connect, new_graph
from .condition import make_condition
from .factory import make_element_step
from .guards import guard_selector
from .models import ConditionSpec, Graph, Step
from .schema import ElementSpec, parse_yaml, validate_workflow


def load_workflow(yaml_text: str, agents: Optional[Mapping[str, Any]] = None) -> Graph:
    """
    Load a workflow Graph from a YAML string.

    `agents` maps the names used by `agent:` elements to agent objects;
    `tool:` elements are looked up in the tool registry.
    """
    spec = validate_workflow(parse_yaml(yaml_text))
    return build_sequence(spec.steps, agents, name=spec.name)


def load_workflow_file(path: str, agents: Optional[Mapping[str, Any]] = None) -> Graph:
    with open(path, "r") as f:
        return load_workflow(f.read(), agents)


def build_sequence(elements: List[ElementSpec], agents: Optional[Mapping[str, Any]] = None,
                   name: Optional[str] = None) -> Graph:
    graph = new_graph(name)
    for element in elements:
        graph = connect(graph, build_element(element, agents))
    return graph


def build_element(element: ElementSpec, agents: Optional[Mapping[str, Any]] = None) -> Union[Step, ConditionSpec]:
    if element.branches is None:
        return make_element_step(element, agents)
    return _build_condition(element, agents)


def _build_condition(element: ElementSpec, agents: Optional[Mapping[str, Any]]) -> ConditionSpec:
    guards = {branch_name: branch.when for branch_name, branch in element.branches.items()}
    bodies = {}
    for branch_name, branch in element.branches.items():
        if len(branch.steps) == 1 and branch.steps[0].branches is None:
            body = build_element(branch.steps[0], agents)
        else:
            body = build_sequence(branch.steps, agents, name=branch_name)
        bodies[branch_name] = body
    return make_condition(guard_selector(guards, element.mode), bodies, name=element.name or "condition")
