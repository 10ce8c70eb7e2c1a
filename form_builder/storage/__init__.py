"""Object storage persistence for form specs."""

from form_builder.storage.object_store import ObjectStore, create_s3_client, is_not_found
from form_builder.storage.form_service import FormService, form_key

__all__ = [
    "ObjectStore",
    "create_s3_client",
    "is_not_found",
    "FormService",
    "form_key",
]
