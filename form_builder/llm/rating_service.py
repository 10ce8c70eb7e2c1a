"""Answer rating through an LLM provider.

Builds prompts from the YAML templates, requests schema-shaped output and
post-processes it into the payloads the API returns.
"""

import json
import logging
from typing import Any, Dict, Optional

from form_builder.core.config import Settings
from form_builder.domain.field_rating import (
    DetailedRowInput,
    SimpleFieldInput,
    format_examples,
    format_row_data,
    strip_suggestion,
)
from form_builder.domain.rating_mapper import map_ratings_by_paths, strip_empty_rates
from form_builder.llm.models import Message
from form_builder.llm.prompt_builder import (
    DETAILED_ROW_TEMPLATE,
    FORM_TEMPLATE,
    SIMPLE_FIELD_TEMPLATE,
    create_system_prompt,
    detailed_row_user_prompt,
    form_user_prompt,
    load_llm_config,
    load_template,
    simple_field_user_prompt,
)
from form_builder.llm.providers.anthropic import AnthropicProvider
from form_builder.llm.providers.base import LLMProvider
from form_builder.llm.schemas import FIELD_RATING_SCHEMA, FORM_RATING_SCHEMA

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "sonnet"
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 1024


class RatingService:
    """Rates single fields, detailed-table cells and whole forms."""

    def __init__(
        self,
        provider: LLMProvider,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        self._provider = provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: Optional[LLMProvider] = None,
    ) -> "RatingService":
        """Environment values win over ``llm.yaml``, which wins over defaults."""
        config = load_llm_config()
        if provider is None:
            provider = AnthropicProvider(
                api_key=settings.anthropic_api_key or "",
                timeout=float(config.get("timeout_seconds", 60)),
            )
        return cls(
            provider=provider,
            model=settings.llm_model or config.get("model", DEFAULT_MODEL),
            temperature=(
                settings.llm_temperature
                if settings.llm_temperature is not None
                else float(config.get("temperature", DEFAULT_TEMPERATURE))
            ),
            max_tokens=settings.llm_max_tokens or int(config.get("max_tokens", DEFAULT_MAX_TOKENS)),
        )

    async def _structured(self, system_prompt: str, user_prompt: str, schema: Dict[str, Any]) -> Any:
        response = await self._provider.complete_structured(
            messages=[Message.user(user_prompt)],
            schema=schema,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system_prompt=system_prompt,
        )
        logger.info(
            f"Rating call completed: model={response.model} "
            f"tokens={response.total_tokens} latency={response.latency_ms:.0f}ms"
        )
        return response.data

    async def rate_simple_field(self, field: SimpleFieldInput) -> Dict[str, Any]:
        """``{comment, rate?, suggestionResponse?}`` for one free-text answer."""
        tpl = load_template(SIMPLE_FIELD_TEMPLATE)
        result = await self._structured(
            create_system_prompt(tpl, field.prompt_config),
            simple_field_user_prompt(
                tpl,
                question=field.question,
                value=field.value,
                examples=format_examples(field.examples),
            ),
            FIELD_RATING_SCHEMA,
        )
        return strip_suggestion(result)

    async def rate_detailed_row(self, row: DetailedRowInput) -> Dict[str, Any]:
        """``{comment, rate?, suggestionResponse?}`` for one table cell."""
        tpl = load_template(DETAILED_ROW_TEMPLATE)
        result = await self._structured(
            create_system_prompt(tpl, row.prompt_config),
            detailed_row_user_prompt(
                tpl,
                question=row.question,
                attribute_name=row.attribute_name,
                attribute_value=row.attribute_value,
                row_data=format_row_data(row.row_data),
                examples=format_examples(row.examples),
            ),
            FIELD_RATING_SCHEMA,
        )
        return strip_suggestion(result)

    async def rate_form(self, spec: Dict[str, Any], value: Any) -> Dict[str, Dict[str, Any]]:
        """Ratings for every question of ``spec``, keyed by ``s{si}.q{qi}``."""
        tpl = load_template(FORM_TEMPLATE)
        result = await self._structured(
            create_system_prompt(tpl),
            form_user_prompt(
                tpl,
                spec_json=json.dumps(spec, indent=2, ensure_ascii=False),
                value_json=json.dumps(value if value is not None else {}, indent=2, ensure_ascii=False),
            ),
            FORM_RATING_SCHEMA,
        )
        return strip_empty_rates(map_ratings_by_paths(spec, result))
