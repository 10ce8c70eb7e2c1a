"""Input checks and formatting for single-field rating requests.

Two request shapes share the same rules: a simple free-text answer
(``question`` + ``value``) and one cell of a detailed question's row
(``question`` + ``attributeName`` + ``attributeValue`` + ``rowData``).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

MAX_QUESTION_LENGTH = 1000
MAX_VALUE_LENGTH = 10000
MAX_EXAMPLES = 10
MAX_EXAMPLE_LENGTH = 1000
MAX_PROMPT_OVERRIDE_LENGTH = 1000

NO_EXAMPLES = "No examples provided."
NO_ROW_DATA = "No additional row data."

PROMPT_OVERRIDE_KEYS = ("task", "role", "guidelines")


class FieldInputError(ValueError):
    """A rating request failed input validation. The message is client-facing."""


@dataclass
class SimpleFieldInput:
    question: str
    value: str
    examples: List[str] = field(default_factory=list)
    prompt_config: Dict[str, str] = field(default_factory=dict)


@dataclass
class DetailedRowInput:
    question: str
    attribute_name: str
    attribute_value: str
    row_data: Dict[str, Any] = field(default_factory=dict)
    examples: List[str] = field(default_factory=list)
    prompt_config: Dict[str, str] = field(default_factory=dict)


def _require_str(value: Any, message: str) -> str:
    if not value or not isinstance(value, str):
        raise FieldInputError(message)
    return value


def _require_text(value: Any, message: str) -> str:
    if not value or not isinstance(value, str) or not value.strip():
        raise FieldInputError(message)
    return value


def _check_length(value: str, limit: int, label: str) -> None:
    if len(value) > limit:
        raise FieldInputError(f"{label} exceeds maximum length of {limit} characters")


def _check_examples(examples: Any) -> List[str]:
    if examples is None:
        return []
    if not isinstance(examples, list):
        raise FieldInputError("Examples must be an array")
    if len(examples) > MAX_EXAMPLES:
        raise FieldInputError(f"Examples array exceeds maximum of {MAX_EXAMPLES} items")
    for i, example in enumerate(examples):
        if not isinstance(example, str):
            raise FieldInputError(f"Example at index {i} must be a string")
        _check_length(example, MAX_EXAMPLE_LENGTH, f"Example at index {i}")
    return examples


def _check_prompt_config(config: Any) -> Dict[str, str]:
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise FieldInputError("promptConfig must be an object")
    overrides = {}
    for key in PROMPT_OVERRIDE_KEYS:
        value = config.get(key)
        if value is None or value == "":
            continue
        if not isinstance(value, str):
            raise FieldInputError(f"promptConfig.{key} must be a string")
        _check_length(value, MAX_PROMPT_OVERRIDE_LENGTH, f"promptConfig.{key}")
        overrides[key] = value
    return overrides


def parse_simple_field(body: Optional[Dict[str, Any]]) -> SimpleFieldInput:
    """Validate a simple-field rating body. Raises ``FieldInputError``."""
    body = body if isinstance(body, dict) else {}
    question = _require_str(body.get("question"), "Missing or invalid question")
    value = _require_text(body.get("value"), "Missing or empty value")
    _check_length(question, MAX_QUESTION_LENGTH, "Question")
    _check_length(value, MAX_VALUE_LENGTH, "Value")
    return SimpleFieldInput(
        question=question,
        value=value,
        examples=_check_examples(body.get("examples")),
        prompt_config=_check_prompt_config(body.get("promptConfig")),
    )


def parse_detailed_row(body: Optional[Dict[str, Any]]) -> DetailedRowInput:
    """Validate a detailed-row rating body. Raises ``FieldInputError``."""
    body = body if isinstance(body, dict) else {}
    question = _require_str(body.get("question"), "Missing or invalid question")
    attribute_name = _require_str(body.get("attributeName"), "Missing or invalid attributeName")
    attribute_value = _require_text(body.get("attributeValue"), "Missing or empty attributeValue")
    _check_length(question, MAX_QUESTION_LENGTH, "Question")
    _check_length(attribute_name, MAX_QUESTION_LENGTH, "Attribute name")
    _check_length(attribute_value, MAX_VALUE_LENGTH, "Attribute value")

    row_data = body.get("rowData")
    return DetailedRowInput(
        question=question,
        attribute_name=attribute_name,
        attribute_value=attribute_value,
        row_data=row_data if isinstance(row_data, dict) else {},
        examples=_check_examples(body.get("examples")),
        prompt_config=_check_prompt_config(body.get("promptConfig")),
    )


def format_examples(examples: List[str]) -> str:
    """Numbered list, one example per line."""
    if not examples:
        return NO_EXAMPLES
    return "\n".join(f"{i + 1}. {example}" for i, example in enumerate(examples))


def _cell_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_row_data(row_data: Dict[str, Any]) -> str:
    """``- key: value`` lines, skipping null and blank cells."""
    lines = [
        f"- {key}: {_cell_text(value)}"
        for key, value in (row_data or {}).items()
        if value is not None and _cell_text(value).strip() != ""
    ]
    return "\n".join(lines) if lines else NO_ROW_DATA


def strip_suggestion(result: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``suggestionResponse`` unless the rate is ``partial`` or ``invalid``."""
    response = dict(result)
    if response.get("rate") in (None, "", "valid"):
        response.pop("suggestionResponse", None)
    return response
