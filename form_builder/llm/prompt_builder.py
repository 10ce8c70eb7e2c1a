"""Prompt templates for answer rating.

Templates live as YAML next to this module (``prompts/*.yaml``) with the keys
``role``, ``task``, ``context``, ``guidelines`` and ``final_instruction``.
``context`` holds ``{{placeholder}}`` markers filled per request.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"
LLM_CONFIG_PATH = Path(__file__).parent / "config" / "llm.yaml"

SIMPLE_FIELD_TEMPLATE = "rate_simple_field.yaml"
DETAILED_ROW_TEMPLATE = "rate_detailed_row.yaml"
FORM_TEMPLATE = "rate_form.yaml"

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


@dataclass(frozen=True)
class PromptTemplate:
    """One rating prompt as loaded from YAML."""
    role: str
    task: str
    context: str
    guidelines: str
    final_instruction: str

    @classmethod
    def from_yaml(cls, path: Path) -> "PromptTemplate":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(
            role=str(data.get("role", "")).strip(),
            task=str(data.get("task", "")).strip(),
            context=str(data.get("context", "")).strip(),
            guidelines=str(data.get("guidelines", "")).strip(),
            final_instruction=str(data.get("final_instruction", "")).strip(),
        )


@lru_cache
def load_template(filename: str) -> PromptTemplate:
    """Load (and cache) a template from the prompts directory."""
    return PromptTemplate.from_yaml(PROMPTS_DIR / filename)


def load_llm_config() -> Dict[str, Any]:
    """Model defaults from ``config/llm.yaml``; empty if the file is unreadable."""
    try:
        with open(LLM_CONFIG_PATH, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not read {LLM_CONFIG_PATH}: {e}")
        return {}


def create_system_prompt(
    tpl: PromptTemplate,
    overrides: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Build the system prompt.

    ``overrides`` may replace ``role``, ``task`` and ``guidelines``; an empty
    override keeps the template text. The final instruction is never
    overridable.
    """
    overrides = overrides or {}
    role = overrides.get("role") or tpl.role
    task = overrides.get("task") or tpl.task
    guidelines = overrides.get("guidelines") or tpl.guidelines
    return (
        f"Role:\n{role}\n\n"
        f"Task:\n{task}\n\n"
        f"Guidelines:\n{guidelines}\n\n"
        f"Final Instruction:\n{tpl.final_instruction}"
    )


def fill_context(tpl: PromptTemplate, variables: Mapping[str, str]) -> str:
    """Substitute ``{{name}}`` markers in one pass; unknown markers stay as-is."""
    return _PLACEHOLDER.sub(
        lambda m: variables.get(m.group(1), m.group(0)),
        tpl.context,
    )


def simple_field_user_prompt(
    tpl: PromptTemplate, question: str, value: str, examples: str
) -> str:
    return fill_context(tpl, {"question": question, "value": value, "examples": examples})


def detailed_row_user_prompt(
    tpl: PromptTemplate,
    question: str,
    attribute_name: str,
    attribute_value: str,
    row_data: str,
    examples: str,
) -> str:
    return fill_context(tpl, {
        "question": question,
        "attributeName": attribute_name,
        "attributeValue": attribute_value,
        "rowData": row_data,
        "examples": examples,
    })


def form_user_prompt(tpl: PromptTemplate, spec_json: str, value_json: str) -> str:
    return fill_context(tpl, {"spec_json": spec_json, "value_json": value_json})
