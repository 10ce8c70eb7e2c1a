"""Form persistence: one JSON blob per form at ``form/<id>.json``."""

import logging
from typing import Any, Dict, List, Optional

from form_builder.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

FORM_PREFIX = "form/"
FORM_SUFFIX = ".json"


def form_key(form_id: str) -> str:
    return f"{FORM_PREFIX}{form_id}{FORM_SUFFIX}"


class FormService:
    """Save, load, list and delete form specs."""

    def __init__(self, store: ObjectStore):
        self._store = store

    def save_form(self, form_id: str, spec: Any) -> Dict[str, str]:
        key = form_key(form_id)
        to_store = dict(spec) if isinstance(spec, dict) else spec
        self._store.put_json(key, to_store)
        logger.info(f"Saved form '{form_id}' to {key}")
        return {"key": key}

    def load_form(self, form_id: str) -> Optional[Any]:
        return self._store.get_json(form_key(form_id))

    def form_exists(self, form_id: str) -> bool:
        return self.load_form(form_id) is not None

    def list_forms(self, include_unpublished: bool = False) -> List[Dict[str, Any]]:
        """Form ids with display names, in key order.

        Drafts are hidden unless ``include_unpublished``; a spec without a
        ``status`` counts as published. Objects that fail to load are listed
        under their id.
        """
        ids = [
            key[len(FORM_PREFIX):-len(FORM_SUFFIX)]
            for key in self._store.list_keys(FORM_PREFIX)
            if key.startswith(FORM_PREFIX) and key.endswith(FORM_SUFFIX)
        ]

        forms: List[Dict[str, Any]] = []
        for form_id in ids:
            try:
                obj = self.load_form(form_id)
            except Exception as e:
                logger.warning(f"Could not read form '{form_id}' while listing: {e}")
                forms.append({"id": form_id, "name": form_id})
                continue

            obj = obj if isinstance(obj, dict) else {}
            name = obj.get("name") if isinstance(obj.get("name"), str) else form_id
            status = obj.get("status") if isinstance(obj.get("status"), str) else None

            if not include_unpublished and status not in (None, "published"):
                continue

            item: Dict[str, Any] = {"id": form_id, "name": name}
            if status is not None:
                item["status"] = status
            forms.append(item)
        return forms

    def delete_form(self, form_id: str) -> None:
        """Remove a form. Deleting a missing form succeeds."""
        self._store.delete(form_key(form_id))
        logger.info(f"Deleted form '{form_id}'")
