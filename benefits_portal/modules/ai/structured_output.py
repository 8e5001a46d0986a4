"""
Parsing helpers for JSON produced by the language model.

Models wrap the same payload in different envelopes (a top-level ``questions``
key, per-survey objects, an unnamed array, markdown fences). Extractors are
tried in order and the first one that yields a non-empty list wins.
"""
import json
import re
from typing import Any, Callable, List, Optional, Sequence

from benefits_portal.core.exceptions import GenerationError

QUESTION_TEXT_KEYS = ("questionText", "question_text", "question", "text")
NESTED_SURVEY_KEYS = ("quarterlySurvey", "annualSurvey")

Extractor = Callable[[Any], Optional[List[dict]]]

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def parse_json_payload(text: str) -> Any:
    """Parses model output as JSON, tolerating markdown fences and surrounding prose."""
    if not text or not text.strip():
        raise GenerationError("The AI provider returned an empty response")

    candidates = [text.strip()]
    fenced = _FENCE.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])
    start, end = text.find("["), text.rfind("]")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    raise GenerationError("The AI provider returned content that is not valid JSON")


def looks_like_question(item: Any) -> bool:
    return isinstance(item, dict) and any(
        isinstance(item.get(key), str) and item.get(key).strip() for key in QUESTION_TEXT_KEYS
    )


def as_question_list(value: Any) -> Optional[List[dict]]:
    if isinstance(value, list) and value and all(looks_like_question(item) for item in value):
        return value
    return None


# --- Extractor strategies ---

def from_questions_field(parsed: Any) -> Optional[List[dict]]:
    if isinstance(parsed, dict):
        return as_question_list(parsed.get("questions"))
    return None


def from_nested_surveys(parsed: Any) -> Optional[List[dict]]:
    if not isinstance(parsed, dict):
        return None
    collected: List[dict] = []
    seen = set()
    for key in NESTED_SURVEY_KEYS:
        survey = parsed.get(key)
        questions = as_question_list(survey.get("questions")) if isinstance(survey, dict) else None
        for question in questions or []:
            text = question_text_of(question).lower()
            if text not in seen:
                seen.add(text)
                collected.append(question)
    return collected or None


def from_first_question_array(parsed: Any) -> Optional[List[dict]]:
    if not isinstance(parsed, dict):
        return None
    for value in parsed.values():
        questions = as_question_list(value)
        if questions:
            return questions
    return None


def from_bare_array(parsed: Any) -> Optional[List[dict]]:
    return as_question_list(parsed)


QUESTION_EXTRACTORS: Sequence[Extractor] = (
    from_questions_field,
    from_nested_surveys,
    from_first_question_array,
    from_bare_array,
)


def extract_with(parsed: Any, extractors: Sequence[Extractor]) -> List[dict]:
    for extractor in extractors:
        result = extractor(parsed)
        if result:
            return result
    raise GenerationError("No survey questions found in the generated content")


def question_text_of(item: dict) -> str:
    for key in QUESTION_TEXT_KEYS:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""
