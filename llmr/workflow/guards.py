""" Safe evaluation of branch guard expressions such as `value > 10 and len(items) == 2`. """
import ast
import logging
import operator
from collections.abc import Mapping
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

_CONSTANTS = {"true": True, "false": False, "none": None, "null": None}
_FUNCTIONS = {"len": len}
_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
}


def evaluate_condition(expression: str, context: Dict[str, Any]) -> bool:
    """
    Evaluate a guard expression in the provided context.
    Anything that cannot be evaluated (unknown names, type errors) is False.
    """
    expression = expression.strip()
    if expression.lower() in ("true", ""):  # Default to true
        return True

    expression = expression.replace("&&", " and ").replace("||", " or ")
    try:
        return bool(_safe_eval(expression, context))
    except Exception as e:
        logger.debug("Guard %r evaluated as false: %s", expression, e)
        return False


def check_syntax(expression: str) -> None:
    """ Raise ValueError if `expression` is not a parseable guard. """
    expression = expression.strip().replace("&&", " and ").replace("||", " or ")
    if not expression:
        return
    try:
        ast.parse(expression, mode="eval")
    except SyntaxError as e:
        raise ValueError(f"Invalid guard expression {expression!r}: {e.msg}")


def guard_context(value: Any) -> Dict[str, Any]:
    """ Names visible to a guard: `value`, plus the keys of a mapping input. """
    context: Dict[str, Any] = {}
    if isinstance(value, Mapping):
        context.update({k: v for k, v in value.items() if isinstance(k, str)})
    context["value"] = value
    return context


def guard_selector(guards: Dict[str, str], mode: str = "all") -> Callable[[Any], List[str]]:
    """
    Build a branch selector from `{branch_name: guard_expression}`.

    mode "all" selects every branch whose guard holds; "first" selects only
    the first one in declaration order.
    """
    if mode not in ("all", "first"):
        raise ValueError(f"Unknown selection mode: {mode}")
    for expression in guards.values():
        check_syntax(expression)

    def select(value: Any) -> List[str]:
        context = guard_context(value)
        selected = []
        for branch_name, expression in guards.items():
            if evaluate_condition(expression, context):
                selected.append(branch_name)
                if mode == "first":
                    break
        return selected

    return select


def _safe_eval(expression: str, context: Dict[str, Any]) -> Any:
    node = ast.parse(expression, mode='eval')

    def _eval(node):
        if isinstance(node, ast.Expression):
            return _eval(node.body)

        if isinstance(node, ast.BoolOp):
            if isinstance(node.op, ast.And):
                out = True
                for v in node.values:
                    out = out and _eval(v)
                return out
            elif isinstance(node.op, ast.Or):
                out = False
                for v in node.values:
                    out = out or _eval(v)
                return out

        if isinstance(node, ast.UnaryOp):
            if isinstance(node.op, ast.Not):
                return not _eval(node.operand)
            if isinstance(node.op, ast.USub):
                return -_eval(node.operand)
            raise ValueError(f"Unsupported operator: {node.op}")

        if isinstance(node, ast.BinOp):
            op = _BINARY_OPS.get(type(node.op))
            if op is None:
                raise ValueError(f"Unsupported operator: {node.op}")
            return op(_eval(node.left), _eval(node.right))

        if isinstance(node, ast.Compare):
            left = _eval(node.left)
            for op, comparator in zip(node.ops, node.comparators):
                right = _eval(comparator)
                if isinstance(op, ast.Eq):      ok = (left == right)
                elif isinstance(op, ast.NotEq): ok = (left != right)
                elif isinstance(op, ast.Lt):    ok = (left < right)
                elif isinstance(op, ast.LtE):   ok = (left <= right)
                elif isinstance(op, ast.Gt):    ok = (left > right)
                elif isinstance(op, ast.GtE):   ok = (left >= right)
                elif isinstance(op, ast.In):    ok = (left in right)
                elif isinstance(op, ast.NotIn): ok = (left not in right)
                else:
                    raise ValueError(f"Unsupported operator: {op}")
                if not ok:
                    return False
                left = right
            return True

        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCTIONS or node.keywords:
                raise ValueError("Unsupported function call")
            return _FUNCTIONS[node.func.id](*[_eval(a) for a in node.args])

        if isinstance(node, ast.Subscript):
            return _eval(node.value)[_eval(node.slice)]

        if isinstance(node, (ast.List, ast.Tuple)):
            return [_eval(e) for e in node.elts]

        if isinstance(node, ast.Name):
            if node.id in context:
                return context[node.id]
            if node.id.lower() in _CONSTANTS:
                return _CONSTANTS[node.id.lower()]
            raise KeyError(node.id)
        if isinstance(node, ast.Constant):
            return node.value
        raise ValueError("Unsupported expression")

    return _eval(node)
