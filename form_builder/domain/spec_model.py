"""Form specification model.

A form is ``FormSpec -> Section[] -> Question[]``; a question is one of four
variants discriminated on ``type``. Section and question order is load-bearing:
it defines the ``s{si}.q{qi}`` answer/rating paths.

Storage and the HTTP endpoints keep specs as raw JSON. These models are the
typed view for callers that want one (see ``parse_spec``).
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FormStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Rate(str, Enum):
    """LLM-assigned quality tier of a free-text answer."""
    INVALID = "invalid"
    PARTIAL = "partial"
    VALID = "valid"


QUESTION_TYPES = ("simple", "option", "detailed", "image")
INPUT_TYPES = ("input", "textarea")


class _SpecModel(BaseModel):
    # Unknown keys survive a parse/dump round trip.
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class PromptConfig(_SpecModel):
    """Per-question overrides of the rating prompt."""
    task: Optional[str] = None
    role: Optional[str] = None
    guidelines: Optional[str] = None


class SimpleQuestion(_SpecModel):
    type: Literal["simple"] = "simple"
    question: str
    description: Optional[str] = None
    examples: List[str] = Field(default_factory=list)
    multiple: bool = False
    ai_validation: Optional[bool] = Field(default=None, alias="aiValidation")
    prompt_config: Optional[PromptConfig] = Field(default=None, alias="promptConfig")


class OptionQuestion(_SpecModel):
    type: Literal["option"] = "option"
    question: str
    description: Optional[str] = None
    options: List[str]
    justification: bool = False
    multiple: bool = False


class DetailedAttribute(_SpecModel):
    """One column of a detailed (tabular) question."""
    name: str
    description: Optional[str] = None
    options: Optional[List[str]] = None
    examples: Optional[List[str]] = None
    width: Optional[float] = Field(default=None, gt=0, le=1)
    input_type: Optional[Literal["input", "textarea"]] = Field(default=None, alias="inputType")
    ai_validation: Optional[bool] = Field(default=None, alias="aiValidation")
    prompt_config: Optional[PromptConfig] = Field(default=None, alias="promptConfig")


class DetailedQuestion(_SpecModel):
    type: Literal["detailed"] = "detailed"
    question: str
    description: Optional[str] = None
    attributes: List[DetailedAttribute]


class ImageQuestion(_SpecModel):
    type: Literal["image"] = "image"
    question: str
    description: Optional[str] = None
    url: Optional[str] = None


Question = Annotated[
    Union[SimpleQuestion, OptionQuestion, DetailedQuestion, ImageQuestion],
    Field(discriminator="type"),
]


class Section(_SpecModel):
    title: str
    description: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)


class FormSpec(_SpecModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    status: Optional[FormStatus] = None
    sections: List[Section] = Field(default_factory=list)

    def iter_paths(self):
        """Yield ``(path, section, question)`` in form order."""
        for si, section in enumerate(self.sections):
            for qi, question in enumerate(section.questions):
                yield question_path(si, qi), section, question


class Rating(BaseModel):
    """One judgement for one answer path."""
    comment: str = ""
    rate: Optional[Rate] = None
    suggestion_response: Optional[str] = Field(default=None, alias="suggestionResponse")

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Wire form; the suggestion is dropped unless the rate asks for a fix."""
        payload: Dict[str, Any] = {"comment": self.comment}
        if self.rate is not None:
            payload["rate"] = self.rate.value
        if self.suggestion_response is not None and self.rate in (Rate.PARTIAL, Rate.INVALID):
            payload["suggestionResponse"] = self.suggestion_response
        return payload


def question_path(section_index: int, question_index: int) -> str:
    """Canonical answer/rating key for a question."""
    return f"s{section_index}.q{question_index}"


def parse_spec(data: Dict[str, Any]) -> FormSpec:
    """Parse raw JSON into a typed spec. Raises ``pydantic.ValidationError``."""
    return FormSpec.model_validate(data)
