"""JSON schemas for structured rating output."""

RATE_VALUES = ["invalid", "partial", "valid"]

FIELD_RATING_SCHEMA = {
    "type": "object",
    "properties": {
        "comment": {"type": "string"},
        "rate": {"type": "string", "enum": RATE_VALUES},
        "suggestionResponse": {"type": "string"},
    },
    "required": ["comment"],
}

# Flattened one-entry-per-question shape; grouped by section title afterwards.
FORM_RATING_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "sectionTitle": {"type": "string"},
            "questionText": {"type": "string"},
            "comment": {"type": "string"},
            "rate": {"type": "string", "enum": RATE_VALUES},
        },
        "required": ["sectionTitle", "questionText", "comment"],
    },
}
