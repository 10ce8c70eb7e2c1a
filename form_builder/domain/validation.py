"""Advisory validation of raw form specs.

``validate_spec`` never raises: it returns the violations as ordered,
human-readable messages. An empty list means the spec is valid. Callers decide
whether to block persistence on a non-empty result.
"""

from typing import Any, List

from form_builder.domain.spec_model import INPUT_TYPES, QUESTION_TYPES, FormStatus

_STATUSES = tuple(s.value for s in FormStatus)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _nonempty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _question_label(question: Any) -> str:
    text = question.get("question") if isinstance(question, dict) else None
    if not _nonempty_str(text):
        return ""
    if len(text) > 30:
        text = text[:30] + "..."
    return f' ("{text}")'


def validate_spec(obj: Any) -> List[str]:
    """Return the list of violations found in ``obj``."""
    errs: List[str] = []
    if not isinstance(obj, dict):
        errs.append("Root must be an object.")
        return errs

    if not _nonempty_str(obj.get("name")):
        errs.append("`name` is required (string).")
    if "status" in obj and obj["status"] not in _STATUSES:
        errs.append('`status` must be either "draft" or "published".')

    sections = obj.get("sections")
    if not isinstance(sections, list):
        errs.append("`sections` must be an array.")
        return errs

    for si, section in enumerate(sections):
        errs.extend(_validate_section(section, si))
    return errs


def _validate_section(section: Any, si: int) -> List[str]:
    errs: List[str] = []
    if not isinstance(section, dict):
        return [f"Section at index {si} invalid object."]

    title = section.get("title")
    context = f'Section "{title}"' if _nonempty_str(title) else f"Section at index {si}"

    if not _nonempty_str(title):
        errs.append(f"{context}: missing title.")
    questions = section.get("questions")
    if not isinstance(questions, list):
        errs.append(f"{context}: questions must be an array.")
        return errs

    for qi, question in enumerate(questions):
        errs.extend(_validate_question(question, context, qi))
    return errs


def _validate_question(question: Any, section_context: str, qi: int) -> List[str]:
    if not isinstance(question, dict):
        return [f"{section_context} > Question {qi + 1}: invalid object."]

    errs: List[str] = []
    context = f"{section_context} > Question {qi + 1}{_question_label(question)}"
    qtype = question.get("type")

    if qtype not in QUESTION_TYPES:
        errs.append(f"{context}: invalid type.")
    if qtype == "simple" and "aiValidation" in question and not isinstance(question["aiValidation"], bool):
        errs.append(f"{context}: aiValidation must be a boolean.")
    if not _nonempty_str(question.get("question")):
        errs.append(f"{context}: question text is required.")

    if qtype == "option" and not isinstance(question.get("options"), list):
        errs.append(f"{context}: options must be an array.")

    if qtype == "detailed":
        attributes = question.get("attributes")
        if not isinstance(attributes, list):
            errs.append(f"{context}: attributes must be an array.")
        else:
            errs.extend(_validate_attributes(attributes, context))
    return errs


def _validate_attributes(attributes: List[Any], context: str) -> List[str]:
    errs: List[str] = []
    total_width = 0.0

    for ai, attr in enumerate(attributes):
        if not isinstance(attr, dict):
            errs.append(f"{context} > Attribute {ai + 1}: invalid object.")
            continue

        name = attr.get("name")
        attr_context = f"{context} > {name if _nonempty_str(name) else f'Attribute {ai + 1}'}"
        if not _nonempty_str(name):
            errs.append(f"{context} > Attribute {ai + 1}: name is required.")

        if "width" in attr and attr["width"] is not None:
            width = attr["width"]
            if not _is_number(width) or width <= 0 or width > 1:
                errs.append(f"{attr_context}: width must be between 0 and 1.")
            else:
                total_width += width
        if "inputType" in attr and attr["inputType"] not in INPUT_TYPES:
            errs.append(f"{attr_context}: inputType must be 'input' or 'textarea'.")
        if "aiValidation" in attr and not isinstance(attr["aiValidation"], bool):
            errs.append(f"{attr_context}: aiValidation must be a boolean.")

    # 0.3 + 0.3 + 0.4 sums to 1.0000000000000002
    if round(total_width, 9) > 1:
        errs.append(f"{context}: Total width of attributes ({total_width:g}) exceeds 1 (100%).")
    return errs
