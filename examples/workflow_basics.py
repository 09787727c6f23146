"""Example: compose functions and a branch point, then inspect and run the graph."""
import logging

from llmr.workflow.condition import when
from llmr.workflow.context import ExecutionTrace
from llmr.workflow.diagram import render
from llmr.workflow.executor import execute
from llmr.workflow.step import make_step


def add_ten(x):
    return x + 10


def mul_two(x):
    return x * 2


def sub_five(x):
    return x - 5


def classify(x):
    if x > 100:
        return "large"
    if x > 10:
        return "medium"
    return "small"


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    pipeline = make_step(add_ten) >> make_step(mul_two) >> make_step(sub_five)
    print(render(pipeline))
    print("Result:", execute(pipeline, 5))
    print()

    router = make_step(lambda x: x, name="identity") >> when(
        classify,
        large=make_step(lambda x: x / 10, name="shrink"),
        medium=make_step(mul_two),
        small=make_step(lambda x: x + 100, name="boost"),
    ) >> make_step(lambda results: ", ".join(f"{k}={v}" for k, v in results.items()), name="summarise")

    trace = ExecutionTrace()
    print(render(router))
    print("Result:", execute(router, 50, trace=trace))
    print("Visited:", " -> ".join(trace.visited))


if __name__ == "__main__":
    main()
