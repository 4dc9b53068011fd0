"""
Path expressions over JSON documents.

This package compiles path expression text into immutable step sequences
and evaluates them against decoded JSON.

Usage:
    from jsontest.path import compile_path, evaluate

    expr = compile_path("$.users[*].age")
    result = evaluate({"users": [{"age": 30}, {"age": 17}]}, expr)
    if result.matched:
        for match in result.matches:
            print(match.path, match.value)   # $.users[0].age 30 ...
    else:
        print(result.nearest, result.reason, result.available_keys)
"""

from .evaluator import evaluate
from .models import (
    ROOT,
    ConcretePath,
    EvaluationResult,
    Index,
    Key,
    Match,
    Matched,
    PathExpression,
    RecursiveDescent,
    Step,
    Unmatched,
    Wildcard,
)
from .parser import compile_path

__all__ = [
    # Compilation
    "compile_path",
    # Evaluation
    "evaluate",
    # Models
    "PathExpression",
    "Step",
    "Key",
    "Index",
    "Wildcard",
    "RecursiveDescent",
    "ConcretePath",
    "ROOT",
    "Match",
    "Matched",
    "Unmatched",
    "EvaluationResult",
]
