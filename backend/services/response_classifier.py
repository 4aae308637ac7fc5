"""Classifies raw model output into a response envelope."""
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models.envelope import PlainAnswer, ResponseEnvelope, Solution, TestCase


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying raw model output.

    Attributes:
        envelope: Solution or PlainAnswer
        rule: Which branch produced it: "solution", "answer", "unparsed"
            (output was not JSON) or "ambiguous" (JSON matching neither shape)
    """
    envelope: ResponseEnvelope
    rule: str


class ResponseClassifier:
    """
    Validates raw model output against the two legal output shapes.

    The model is asked for either a structured solution or a plain-text
    answer. Output that matches neither still becomes a plain answer so a
    misbehaving model never blocks the user-visible response.
    """

    SOLUTION = "solution"
    ANSWER = "answer"
    UNPARSED = "unparsed"
    AMBIGUOUS = "ambiguous"

    # Wire name -> Solution attribute
    SOLUTION_TEXT_FIELDS = {
        "problemStatement": "problem_statement",
        "approach": "approach",
        "codeSnippet": "code_snippet",
        "timeComplexity": "time_complexity",
        "spaceComplexity": "space_complexity",
        "dryRun": "dry_run",
    }
    TEST_CASES_FIELD = "testCases"

    # Checked in order
    PLAIN_TEXT_FIELDS = ("answer", "text")

    _CODE_FENCE = re.compile(r"^\s*```[A-Za-z]*[ \t]*\n(.*?)\n?```\s*$", re.DOTALL)

    def classify(self, raw: str) -> Classification:
        """
        Classify raw model output.

        Args:
            raw: Text exactly as returned by the model

        Returns:
            Classification with the envelope and the rule that matched
        """
        parsed, ok = self._parse(raw)
        if not ok:
            return Classification(PlainAnswer(text=raw), self.UNPARSED)

        solution = self._as_solution(parsed)
        if solution is not None:
            return Classification(solution, self.SOLUTION)

        answer = self._as_plain_answer(parsed)
        if answer is not None:
            return Classification(answer, self.ANSWER)

        return Classification(PlainAnswer(text=self._stringify(parsed)), self.AMBIGUOUS)

    def _parse(self, raw: str):
        """Parse raw text as JSON, unwrapping a Markdown code fence if present."""
        candidates = [raw]
        fenced = self._CODE_FENCE.match(raw)
        if fenced:
            candidates.append(fenced.group(1))

        for candidate in candidates:
            try:
                return json.loads(candidate), True
            # deeply nested input exhausts the decoder's recursion limit
            except (ValueError, TypeError, RecursionError):
                continue
        return None, False

    def _as_solution(self, parsed: Any) -> Optional[Solution]:
        if not isinstance(parsed, dict):
            return None

        values: Dict[str, str] = {}
        for wire_name, attr in self.SOLUTION_TEXT_FIELDS.items():
            value = parsed.get(wire_name)
            if not isinstance(value, str):
                return None
            values[attr] = value

        test_cases = self._as_test_cases(parsed.get(self.TEST_CASES_FIELD))
        if not test_cases:
            return None

        return Solution(test_cases=test_cases, **values)

    def _as_test_cases(self, value: Any) -> Optional[List[TestCase]]:
        if not isinstance(value, list) or not value:
            return None

        cases = []
        for item in value:
            if not isinstance(item, dict):
                return None
            case_input = item.get("input")
            case_output = item.get("output")
            if not isinstance(case_input, str) or not isinstance(case_output, str):
                return None
            cases.append(TestCase(input=case_input, output=case_output))
        return cases

    def _as_plain_answer(self, parsed: Any) -> Optional[PlainAnswer]:
        if not isinstance(parsed, dict):
            return None
        for name in self.PLAIN_TEXT_FIELDS:
            value = parsed.get(name)
            if isinstance(value, str):
                return PlainAnswer(text=value)
        return None

    @staticmethod
    def _stringify(parsed: Any) -> str:
        if isinstance(parsed, str):
            return parsed
        return json.dumps(parsed, ensure_ascii=False)


def classify_response(raw: str) -> Classification:
    """Classify raw model output with a default classifier."""
    return ResponseClassifier().classify(raw)
