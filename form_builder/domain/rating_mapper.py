"""Map loosely-structured LLM rating output back onto a form spec.

Models return either the preferred flattened shape::

    [{"sectionTitle": ..., "comment": ..., "rate": ...}, ...]

or a nested one::

    {"sections": [{"questions": [{"comment": ..., "rate": ...}]}]}

Flattened items are grouped by normalised section title and consumed in
question order; when a section's group runs out (or its title matched
nothing) a single shared iterator over all items, in original order, takes
over. Nested output is mapped strictly by position.

Both entry points tolerate any input: missing ``sections``/``questions``
degrade to empty lists and a malformed ``result`` yields an empty or partial
map. Nothing here raises.
"""

from typing import Any, Dict, Iterator, List, Tuple

from form_builder.domain.spec_model import question_path

RatingEntry = Dict[str, Any]


def _norm(value: Any) -> str:
    return ("" if value is None else str(value)).strip().lower()


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else None


def _entry(item: Any) -> RatingEntry:
    comment = _get(item, "comment")
    return {
        "comment": "" if comment is None else str(comment),
        "rate": _get(item, "rate") or None,
    }


def _walk_flat(
    sections: List[Any],
    result: List[Any],
) -> Iterator[Tuple[int, Any, int, Any, RatingEntry]]:
    """Yield ``(si, section, qi, question, entry)`` for each assigned rating."""
    grouped: Dict[str, List[RatingEntry]] = {}
    for item in result:
        grouped.setdefault(_norm(_get(item, "sectionTitle")), []).append(_entry(item))

    flat = iter([_entry(item) for item in result])

    for si, section in enumerate(sections):
        bucket = iter(grouped.get(_norm(_get(section, "title")), []))
        for qi, question in enumerate(_as_list(_get(section, "questions"))):
            picked = next(bucket, None)
            if picked is None:
                picked = next(flat, None)
            if picked is None:
                continue
            yield si, section, qi, question, picked


def _walk_nested(
    spec_sections: List[Any],
    result: Any,
) -> Iterator[Tuple[int, Any, int, Any, RatingEntry]]:
    for si, section_res in enumerate(_as_list(_get(result, "sections"))):
        spec_section = spec_sections[si] if si < len(spec_sections) else None
        spec_questions = _as_list(_get(spec_section, "questions"))
        for qi, question_res in enumerate(_as_list(_get(section_res, "questions"))):
            spec_question = spec_questions[qi] if qi < len(spec_questions) else None
            yield si, spec_section, qi, spec_question, _entry(question_res)


def _walk(spec: Any, result: Any):
    sections = _as_list(_get(spec, "sections"))
    if isinstance(result, list):
        return _walk_flat(sections, result)
    return _walk_nested(sections, result)


def map_ratings_by_paths(spec: Any, result: Any) -> Dict[str, RatingEntry]:
    """Ratings keyed by ``s{si}.q{qi}``, the shape the UI consumes."""
    out: Dict[str, RatingEntry] = {}
    for si, _section, qi, _question, entry in _walk(spec, result):
        out[question_path(si, qi)] = entry
    return out


def map_ratings_by_names(spec: Any, result: Any) -> Dict[str, Dict[str, RatingEntry]]:
    """Ratings nested as ``{section title: {question text: rating}}``.

    Sections without a title fall back to ``Section n`` and questions without
    text to ``Question n`` (1-based).
    """
    sections = _as_list(_get(spec, "sections"))
    if isinstance(result, list):
        # every spec section gets a bucket, rated or not
        bucketed = sections
    else:
        # every result section, titled from the spec section at its index
        bucketed = [
            sections[si] if si < len(sections) else None
            for si in range(len(_as_list(_get(result, "sections"))))
        ]
    nested: Dict[str, Dict[str, RatingEntry]] = {}
    for si, section in enumerate(bucketed):
        nested.setdefault(_label(_get(section, "title"), f"Section {si + 1}"), {})
    for si, section, qi, question, entry in _walk(spec, result):
        title = _label(_get(section, "title"), f"Section {si + 1}")
        text = _label(_get(question, "question"), f"Question {qi + 1}")
        nested.setdefault(title, {})[text] = entry
    return nested


def _label(value: Any, fallback: str) -> str:
    return fallback if value is None else str(value)


def strip_empty_rates(ratings: Dict[str, RatingEntry]) -> Dict[str, RatingEntry]:
    """Drop ``rate: None`` keys so the JSON payload omits absent rates."""
    return {
        path: {k: v for k, v in entry.items() if not (k == "rate" and v is None)}
        for path, entry in ratings.items()
    }
