"""Client-side helpers: API client, autosave and local answer storage."""

from form_builder.client.form_api import FormApiClient, FormApiError
from form_builder.client.autosave import AutosaveController, SaveState
from form_builder.client.answer_store import LocalAnswerStore

__all__ = [
    "FormApiClient",
    "FormApiError",
    "AutosaveController",
    "SaveState",
    "LocalAnswerStore",
]
