"""Provider-neutral types for language model calls."""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, Union
from dataclasses import dataclass, field, replace

from pydantic import BaseModel


class LLMProvider(str, Enum):
    """Model hosting providers."""
    OPENAI = "openai"
    VERTEX = "vertex"
    ANTHROPIC = "anthropic"
    MISTRAL = "mistral"
    COHERE = "cohere"
    OLLAMA = "ollama"  # self-hosted / local
    CUSTOM = "custom"  # fine-tuned or user-defined endpoint


class LLMModelCapability(str, Enum):
    """What kind of input/output a model handles."""
    CHAT = "chat"
    COMPLETION = "completion"
    EMBEDDING = "embedding"
    VISION = "vision"


class LLMTask(str, Enum):
    """Workloads a model is known to be good at."""
    FUNCTION_CALL = "function_call"
    TOOL_USE = "tool_use"
    CODE_GEN = "code_generation"
    SQL_GEN = "sql_generation"
    RAG = "retrieval_augmented_gen"
    METADATA_SEARCH = "metadata_search"


class ChatMessageRole(str, Enum):
    """Chat message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    FUNCTION = "function"


class OpenAIChatModels(str, Enum):
    """OpenAI chat model identifiers."""
    GPT_4O = "gpt-4o"
    GPT_4 = "gpt-4"
    GPT_4_TURBO = "gpt-4-turbo"
    GPT_35 = "gpt-3.5-turbo"
    GPT_35_1106 = "gpt-3.5-turbo-1106"


class OpenAIEmbeddingModels(str, Enum):
    """OpenAI embedding model identifiers."""
    SMALL = "text-embedding-3-small"  # 1536 dims
    LARGE = "text-embedding-3-large"  # 3072 dims
    ADA = "text-embedding-ada-002"  # legacy


@dataclass(frozen=True)
class ModelCost:
    """Price in USD per 1K tokens."""
    input_token: float = 0.0
    output_token: float = 0.0

    @property
    def total(self) -> float:
        return self.input_token + self.output_token


@dataclass(frozen=True)
class LLMModel:
    """
    Static description of a hosted model.

    Attributes:
        id: Provider model name sent on the wire
        name: Human readable name
        provider: Hosting provider
        capabilities: Supported input/output kinds
        tasks: Workloads the model is suited for
        cost: Token pricing, if known
        context_window: Maximum prompt size in tokens
        max_output_tokens: Maximum completion size in tokens
    """
    id: str
    name: str
    provider: LLMProvider
    capabilities: Tuple[LLMModelCapability, ...]
    tasks: Tuple[LLMTask, ...] = ()
    cost: Optional[ModelCost] = None
    context_window: Optional[int] = None
    max_output_tokens: Optional[int] = None
    supports_streaming: bool = False
    supports_vision: bool = False
    supports_function_calling: bool = False

    @property
    def total_cost(self) -> float:
        """Input plus output price per 1K tokens (0 when unknown)."""
        return self.cost.total if self.cost else 0.0

    def has_capability(self, capability: LLMModelCapability) -> bool:
        return capability in self.capabilities

    def supports_task(self, task: LLMTask) -> bool:
        return task in self.tasks


@dataclass
class LLMModelConfig:
    """Per-call generation parameters; unset values fall back to provider defaults."""
    model_name: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    max_tokens: Optional[int] = None
    stop_sequences: Optional[List[str]] = None
    stream: bool = False
    provider_extras: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **overrides: Any) -> "LLMModelConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


@dataclass
class ChatMessage:
    """Single chat turn."""
    role: ChatMessageRole
    content: str
    name: Optional[str] = None
    tool_call_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.name:
            data["name"] = self.name
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        return data


@dataclass
class ModelUseCase:
    """
    Requirements used to pick a model from the registry.

    Attributes:
        capability: Required capability
        task: Required task, if any
        requires_vision: Only models with vision support
        requires_function_calling: Only models with function calling
        max_budget: Maximum input+output price per 1K tokens
        preferred_provider: Narrow to this provider when it has candidates
    """
    capability: LLMModelCapability
    task: Optional[LLMTask] = None
    requires_vision: bool = False
    requires_function_calling: bool = False
    max_budget: Optional[float] = None
    preferred_provider: Optional[LLMProvider] = None


@dataclass
class LLMRequest:
    """Free-form text generation request."""
    prompt: Optional[str] = None
    messages: Optional[List[ChatMessage]] = None
    system: Optional[str] = None
    priority: Optional[List[LLMModel]] = None
    use_case: Optional[ModelUseCase] = None
    config: LLMModelConfig = field(default_factory=LLMModelConfig)


@dataclass
class ExtractionExample:
    """Few-shot example: source text and the expected extraction."""
    input: str
    output: Union[Dict[str, Any], BaseModel]


@dataclass
class StructuredOutputRequest:
    """Request for output validated against a pydantic schema."""
    prompt: str
    schema: Type[BaseModel]
    examples: List[ExtractionExample] = field(default_factory=list)
    priority: Optional[List[LLMModel]] = None
    use_case: Optional[ModelUseCase] = None
    config: LLMModelConfig = field(default_factory=LLMModelConfig)


EmbeddingInput = Union[str, Dict[str, Any], List[Union[str, Dict[str, Any]]]]


@dataclass
class EmbeddingRequest:
    """Embedding request for one input or a batch."""
    input: EmbeddingInput
    priority: Optional[List[LLMModel]] = None
    config: LLMModelConfig = field(default_factory=LLMModelConfig)


@dataclass
class EmbeddingResponse:
    """Embedding vectors in input order."""
    embeddings: List[List[float]]
    model: str

    @property
    def dimensions(self) -> int:
        return len(self.embeddings[0]) if self.embeddings else 0
