"""Value types shared by the LLM providers and the rating service."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"


@dataclass
class Message:
    role: MessageRole
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(MessageRole.USER, content)

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class StructuredResponse:
    """Schema-conforming output of one provider call, with usage figures."""
    data: Any
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0.0
    stop_reason: str = "tool_use"

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMErrorKind(str, Enum):
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    API_ERROR = "api_error"
    INVALID_OUTPUT = "invalid_output"
    CONFIGURATION = "configuration"


@dataclass(frozen=True)
class LLMError:
    """
    Why a provider call failed.

    None of these are retried: rating is interactive and the caller decides
    whether to try again.
    """
    kind: LLMErrorKind
    message: str
    status_code: Optional[int] = None
    request_id: Optional[str] = None

    @classmethod
    def rate_limit(cls, message: str, request_id: Optional[str] = None) -> "LLMError":
        return cls(LLMErrorKind.RATE_LIMIT, message, 429, request_id)

    @classmethod
    def timeout(cls, message: str) -> "LLMError":
        return cls(LLMErrorKind.TIMEOUT, message)

    @classmethod
    def api_error(cls, message: str, status_code: int, request_id: Optional[str] = None) -> "LLMError":
        return cls(LLMErrorKind.API_ERROR, message, status_code, request_id)

    @classmethod
    def invalid_output(cls, message: str) -> "LLMError":
        """The model answered, but not in the requested shape."""
        return cls(LLMErrorKind.INVALID_OUTPUT, message)

    @classmethod
    def configuration(cls, message: str) -> "LLMError":
        return cls(LLMErrorKind.CONFIGURATION, message)


class LLMException(Exception):
    """Raised by providers; ``error`` says what went wrong."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)
