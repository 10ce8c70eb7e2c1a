"""Form identifiers derived from display names."""

import re
from typing import Dict, Iterable, Tuple

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\-]", re.ASCII)


def slugify(name: str) -> str:
    """Storage id for a form name.

    Lowercase, trim, whitespace runs become ``-``, then anything that is not a
    word character or ``-`` is dropped: ``"My Test Form!" -> "my-test-form"``.
    """
    slug = name.lower().strip()
    slug = _WHITESPACE.sub("-", slug)
    return _NON_WORD.sub("", slug)


def next_available_name_and_id(
    base_name: str,
    forms: Iterable[Dict[str, str]],
) -> Tuple[str, str]:
    """First of ``base``, ``base 2``, ``base 3``... whose name and id are both free."""
    forms = list(forms or [])
    names = {(f.get("name") or "").strip() for f in forms} - {""}
    ids = {f.get("id") for f in forms}
    base = (base_name or "").strip() or "Untitled"

    i = 0
    while True:
        name = base if i == 0 else f"{base} {i + 1}"
        form_id = slugify(name)
        if name not in names and form_id not in ids:
            return name, form_id
        i += 1
