"""Language model layer: types, model catalogue, provider clients and service."""

from .models import (
    ChatMessage,
    ChatMessageRole,
    EmbeddingRequest,
    EmbeddingResponse,
    ExtractionExample,
    LLMModel,
    LLMModelCapability,
    LLMModelConfig,
    LLMProvider,
    LLMRequest,
    LLMTask,
    ModelCost,
    ModelUseCase,
    OpenAIChatModels,
    OpenAIEmbeddingModels,
    StructuredOutputRequest,
)
from .registry import ModelRegistry, ModelSelector
from .service import LLMService

__all__ = [
    "ChatMessage",
    "ChatMessageRole",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "ExtractionExample",
    "LLMModel",
    "LLMModelCapability",
    "LLMModelConfig",
    "LLMProvider",
    "LLMRequest",
    "LLMTask",
    "ModelCost",
    "ModelUseCase",
    "OpenAIChatModels",
    "OpenAIEmbeddingModels",
    "StructuredOutputRequest",
    "ModelRegistry",
    "ModelSelector",
    "LLMService",
]
