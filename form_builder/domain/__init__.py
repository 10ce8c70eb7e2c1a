"""Form domain: spec model, validation, slugs and rating mapping."""

from form_builder.domain.spec_model import (
    FormSpec,
    FormStatus,
    Section,
    Question,
    SimpleQuestion,
    OptionQuestion,
    DetailedQuestion,
    DetailedAttribute,
    ImageQuestion,
    PromptConfig,
    Rate,
    Rating,
    parse_spec,
    question_path,
)
from form_builder.domain.slug import slugify, next_available_name_and_id
from form_builder.domain.validation import validate_spec
from form_builder.domain.rating_mapper import (
    map_ratings_by_names,
    map_ratings_by_paths,
    strip_empty_rates,
)

__all__ = [
    # Model
    "FormSpec",
    "FormStatus",
    "Section",
    "Question",
    "SimpleQuestion",
    "OptionQuestion",
    "DetailedQuestion",
    "DetailedAttribute",
    "ImageQuestion",
    "PromptConfig",
    "Rate",
    "Rating",
    "parse_spec",
    "question_path",
    # Slugs
    "slugify",
    "next_available_name_and_id",
    # Validation
    "validate_spec",
    # Ratings
    "map_ratings_by_names",
    "map_ratings_by_paths",
    "strip_empty_rates",
]
