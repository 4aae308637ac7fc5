"""Response envelope models returned to the caller."""
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Union


@dataclass(frozen=True)
class TestCase:
    """One input/expected-output pair of a solution."""
    __test__ = False  # not a pytest test class

    input: str
    output: str


@dataclass(frozen=True)
class Solution:
    """Structured answer to a coding problem."""
    type: ClassVar[str] = "solution"

    problem_statement: str
    approach: str
    code_snippet: str
    time_complexity: str
    space_complexity: str
    dry_run: str
    test_cases: List[TestCase] = field(default_factory=list)


@dataclass(frozen=True)
class PlainAnswer:
    """Free-text answer."""
    type: ClassVar[str] = "response"

    text: str


ResponseEnvelope = Union[Solution, PlainAnswer]


def envelope_to_payload(envelope: ResponseEnvelope) -> Dict[str, Any]:
    """
    Map an envelope to its wire shape.

    Solutions become ``{"type": "solution", "data": {...}}`` with camelCase
    keys; plain answers become ``{"type": "response", "text": ...}``.
    """
    if isinstance(envelope, Solution):
        return {
            "type": Solution.type,
            "data": {
                "problemStatement": envelope.problem_statement,
                "approach": envelope.approach,
                "codeSnippet": envelope.code_snippet,
                "timeComplexity": envelope.time_complexity,
                "spaceComplexity": envelope.space_complexity,
                "dryRun": envelope.dry_run,
                "testCases": [
                    {"input": case.input, "output": case.output}
                    for case in envelope.test_cases
                ],
            },
        }
    if isinstance(envelope, PlainAnswer):
        return {"type": PlainAnswer.type, "text": envelope.text}
    raise TypeError(f"Unsupported envelope type: {type(envelope).__name__}")
