"""Provider client interface."""

from typing import Any, Dict, List, Protocol, Sequence, Union, runtime_checkable

from pydantic import BaseModel

from ..models import LLMModelConfig, LLMRequest, StructuredOutputRequest


@runtime_checkable
class LLMClient(Protocol):
    """
    What LLMService needs from a provider.

    ``config.model_name`` is always set by the service to the selected
    model's id before a client method is called.
    """

    async def generate_text(self, request: LLMRequest, config: LLMModelConfig) -> str: ...

    async def generate_structured_output(
        self, request: StructuredOutputRequest, config: LLMModelConfig
    ) -> BaseModel: ...

    async def generate_structured_output_with_examples(
        self, request: StructuredOutputRequest, config: LLMModelConfig
    ) -> BaseModel: ...

    async def embed(
        self, inputs: Sequence[Union[str, Dict[str, Any]]], config: LLMModelConfig
    ) -> List[List[float]]: ...
