"""Provider-neutral entry point for text, structured output and embeddings."""

import logging
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from ..core.config import Settings, get_settings
from ..core.exceptions import (
    LLMError,
    ModelSelectionError,
    PeopleSearchError,
    ProviderNotAvailableError,
    ValidationError,
)
from .clients.base import LLMClient
from .clients.openai_client import OpenAIClient
from .models import (
    EmbeddingRequest,
    EmbeddingResponse,
    LLMModel,
    LLMModelConfig,
    LLMProvider,
    LLMRequest,
    ModelUseCase,
    StructuredOutputRequest,
)
from .registry import ModelRegistry, ModelSelector

logger = logging.getLogger(__name__)


class LLMService:
    """
    Routes model calls to the client registered for the model's provider.

    Model choice per call: the first model of ``priority``, else the best
    registry model for ``use_case``, else a sensible default. Remaining
    priority entries act as fallbacks when a provider call fails.
    """

    def __init__(
        self,
        clients: Optional[Dict[LLMProvider, LLMClient]] = None,
        selector: Optional[ModelSelector] = None,
        settings: Optional[Settings] = None
    ):
        """
        Initialize LLM service.

        Args:
            clients: Provider clients; defaults to an OpenAI client
            selector: Model selector; defaults to the full registry
            settings: Application settings
        """
        self.settings = settings or get_settings()
        self.selector = selector or ModelSelector()
        self._clients: Dict[LLMProvider, LLMClient] = {}

        if clients is None:
            clients = {LLMProvider.OPENAI: OpenAIClient(settings=self.settings)}
        for provider, client in clients.items():
            self.register_client(provider, client)

    def register_client(self, provider: LLMProvider, client: LLMClient) -> None:
        """Register (or replace) the client for a provider."""
        self._clients[provider] = client
        logger.debug(f"Registered LLM client for provider: {provider.value}")

    def get_available_providers(self) -> List[LLMProvider]:
        return list(self._clients.keys())

    def get_client(self, model: LLMModel) -> LLMClient:
        """
        Return the client serving a model.

        Raises:
            ProviderNotAvailableError: If no client is registered for the provider
        """
        client = self._clients.get(model.provider)
        if client is None:
            raise ProviderNotAvailableError(f"No client available for provider: {model.provider.value}")
        return client

    def resolve_model(
        self,
        priority: Optional[Sequence[LLMModel]],
        use_case: Optional[ModelUseCase],
        default: LLMModel
    ) -> List[LLMModel]:
        """
        Ordered list of models to try for a call.

        Raises:
            ModelSelectionError: If a use case is given and nothing satisfies it
        """
        if priority:
            return list(priority)

        if use_case is not None:
            model = self.selector.get_best_model_for_use_case(use_case)
            if model is None:
                raise ModelSelectionError(f"No model satisfies use case: {use_case}")
            return [model]

        return [default]

    async def generate_text(self, request: LLMRequest) -> str:
        """
        Generate a free-form text response.

        Args:
            request: Prompt or chat messages, model preferences and config

        Returns:
            Model reply text

        Raises:
            ValidationError: If neither prompt nor messages are given
            LLMError: If every candidate model fails
        """
        logger.info("Generating text response...")

        if not request.prompt and not request.messages:
            raise ValidationError("Prompt is required for text generation")

        candidates = self.resolve_model(request.priority, request.use_case, ModelRegistry.GPT_4O)

        async def call(client: LLMClient, config: LLMModelConfig) -> str:
            return await client.generate_text(request, config)

        return await self._call_with_fallback(candidates, request.config, call, "generate_text")

    async def generate_structured_output(self, request: StructuredOutputRequest) -> BaseModel:
        """
        Generate output validated against ``request.schema``.

        Few-shot examples, when present, are sent ahead of the prompt.

        Raises:
            ValidationError: If the prompt is empty
            LLMError: If every candidate model fails
        """
        logger.info("Generating structured output...")

        if not request.prompt or not request.prompt.strip():
            raise ValidationError("Prompt is required for structured output generation")

        candidates = self.resolve_model(request.priority, request.use_case, ModelRegistry.GPT_4O)

        async def call(client: LLMClient, config: LLMModelConfig) -> BaseModel:
            if request.examples:
                return await client.generate_structured_output_with_examples(request, config)
            return await client.generate_structured_output(request, config)

        return await self._call_with_fallback(candidates, request.config, call, "generate_structured_output")

    async def execute_embedding(self, request: EmbeddingRequest) -> EmbeddingResponse:
        """
        Embed one input or a batch of inputs.

        Raises:
            ValidationError: If the input is empty
            LLMError: If every candidate model fails
        """
        inputs = request.input if isinstance(request.input, list) else [request.input]
        if not inputs:
            raise ValidationError("Embedding input cannot be empty")

        candidates = self.resolve_model(request.priority, None, ModelRegistry.OPENAI_EMBEDDING_SMALL)
        used: Dict[str, str] = {}

        async def call(client: LLMClient, config: LLMModelConfig) -> List[List[float]]:
            used["model"] = config.model_name
            return await client.embed(inputs, config)

        embeddings = await self._call_with_fallback(candidates, request.config, call, "embed")
        return EmbeddingResponse(embeddings=embeddings, model=used["model"])

    async def embed_texts(
        self,
        texts: Sequence[str],
        model: Optional[LLMModel] = None
    ) -> List[List[float]]:
        """Convenience wrapper returning only the vectors."""
        response = await self.execute_embedding(
            EmbeddingRequest(input=list(texts), priority=[model] if model else None)
        )
        return response.embeddings

    async def _call_with_fallback(self, candidates, base_config, call, operation):
        last_error: Optional[Exception] = None

        for model in candidates:
            try:
                client = self.get_client(model)
                config = base_config.merged(model_name=model.id)
                logger.info(f"Using model: {model.name} and provider: {model.provider.value}")
                return await call(client, config)
            except ValidationError:
                raise
            except Exception as e:
                last_error = e
                logger.warning(f"{operation} failed with model {model.id}: {str(e)}")

        if isinstance(last_error, PeopleSearchError) and len(candidates) == 1:
            raise last_error
        raise LLMError(f"{operation} failed for all candidate models: {str(last_error)}")
