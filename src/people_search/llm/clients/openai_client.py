"""OpenAI provider client built on the async SDK."""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel

from ...core.config import Settings, get_settings
from ...core.exceptions import ConfigurationError, LLMError, StructuredOutputError, ValidationError
from ...utils.llm_json import require_object
from ...utils.profile_text import convert_to_plain_text
from ..models import (
    ChatMessageRole,
    LLMModelConfig,
    LLMRequest,
    OpenAIChatModels,
    OpenAIEmbeddingModels,
    StructuredOutputRequest,
)

logger = logging.getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = """You are an expert extraction algorithm.
Only extract relevant information from the text.
If you do not know the value of an attribute asked to extract,
return null for the attribute's value."""

EXTRACTION_WITH_EXAMPLES_SYSTEM_PROMPT = """You are an expert extraction algorithm. I will provide you with reference examples to guide your extraction.
Learn from these examples to understand the expected extraction patterns and quality.
Only extract relevant information from the text.
If you do not know the value of an attribute asked to extract, return null for the attribute's value.
Follow the patterns demonstrated in the examples below."""


def _schema_instructions(schema: type) -> str:
    return (
        "Respond with a single JSON object that matches this JSON schema:\n"
        f"{json.dumps(schema.model_json_schema())}"
    )


class OpenAIClient:
    """
    LLM client for OpenAI and OpenAI-compatible endpoints.

    The SDK client is created on first use so a missing API key only
    matters when a call is actually made.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
        default_config: Optional[LLMModelConfig] = None
    ):
        """
        Initialize OpenAI client.

        Args:
            settings: Application settings (API key, base URL, timeouts)
            client: Pre-built SDK client, mainly for tests
            default_config: Fallback generation parameters
        """
        self.settings = settings or get_settings()
        self.default_config = default_config or LLMModelConfig()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.openai_api_key:
                raise ConfigurationError(
                    "Missing OpenAI API key. Set OPENAI_API_KEY or PEOPLE_SEARCH_OPENAI_API_KEY."
                )
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
                timeout=self.settings.openai_timeout_seconds,
                max_retries=self.settings.openai_max_retries,
            )
        return self._client

    async def generate_text(self, request: LLMRequest, config: LLMModelConfig) -> str:
        """Chat completion returning the reply text."""
        if request.messages:
            messages = [message.to_dict() for message in request.messages]
            if request.system:
                messages.insert(0, {"role": ChatMessageRole.SYSTEM.value, "content": request.system})
        else:
            messages = []
            if request.system:
                messages.append({"role": ChatMessageRole.SYSTEM.value, "content": request.system})
            messages.append({"role": ChatMessageRole.USER.value, "content": request.prompt or ""})

        return await self._complete(messages, config)

    async def generate_structured_output(
        self,
        request: StructuredOutputRequest,
        config: LLMModelConfig
    ) -> BaseModel:
        """Extract data matching ``request.schema`` from the prompt."""
        messages = [
            {
                "role": ChatMessageRole.SYSTEM.value,
                "content": f"{EXTRACTION_SYSTEM_PROMPT}\n\n{_schema_instructions(request.schema)}",
            },
            {"role": ChatMessageRole.USER.value, "content": request.prompt},
        ]
        text = await self._complete(messages, config, json_mode=True)
        return self._parse_structured(text, request.schema)

    async def generate_structured_output_with_examples(
        self,
        request: StructuredOutputRequest,
        config: LLMModelConfig
    ) -> BaseModel:
        """Same as generate_structured_output, primed with few-shot examples."""
        messages = [
            {
                "role": ChatMessageRole.SYSTEM.value,
                "content": f"{EXTRACTION_WITH_EXAMPLES_SYSTEM_PROMPT}\n\n{_schema_instructions(request.schema)}",
            }
        ]
        for example in request.examples:
            messages.append({"role": ChatMessageRole.USER.value, "content": example.input})
            messages.append(
                {"role": ChatMessageRole.ASSISTANT.value, "content": convert_to_plain_text(example.output)}
            )
        messages.append({"role": ChatMessageRole.USER.value, "content": request.prompt})

        text = await self._complete(messages, config, json_mode=True)
        return self._parse_structured(text, request.schema)

    async def embed(
        self,
        inputs: Sequence[Union[str, Dict[str, Any]]],
        config: LLMModelConfig
    ) -> List[List[float]]:
        """Embed a batch of inputs; non-string inputs are JSON encoded."""
        texts = [item if isinstance(item, str) else json.dumps(item) for item in inputs]
        model = config.model_name or self.default_config.model_name or OpenAIEmbeddingModels.SMALL.value

        try:
            response = await self.client.embeddings.create(model=model, input=texts)
        except OpenAIError as e:
            logger.error(f"OpenAI embedding call failed: {str(e)}")
            raise LLMError(f"OpenAI embedding call failed: {str(e)}")

        data = sorted(response.data, key=lambda item: item.index)
        return [list(item.embedding) for item in data]

    async def _complete(
        self,
        messages: List[Dict[str, Any]],
        config: LLMModelConfig,
        json_mode: bool = False
    ) -> str:
        kwargs = self._completion_kwargs(config)
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(messages=messages, **kwargs)
        except OpenAIError as e:
            logger.error(f"OpenAI chat call failed: {str(e)}")
            raise LLMError(f"OpenAI chat call failed: {str(e)}")

        content = response.choices[0].message.content
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(
                f"OpenAI usage for {kwargs['model']}: "
                f"{getattr(usage, 'prompt_tokens', 0)} in / {getattr(usage, 'completion_tokens', 0)} out"
            )
        return content or ""

    def _completion_kwargs(self, config: LLMModelConfig) -> Dict[str, Any]:
        default = self.default_config
        if config.stream or default.stream:
            raise ValidationError("Streaming responses are not supported by OpenAIClient")

        def pick(name: str) -> Any:
            value = getattr(config, name)
            return value if value is not None else getattr(default, name)

        temperature = pick("temperature")
        kwargs: Dict[str, Any] = {
            "model": pick("model_name") or OpenAIChatModels.GPT_4O.value,
            "temperature": temperature if temperature is not None else self.settings.default_temperature,
        }
        optional = {
            "top_p": pick("top_p"),
            "frequency_penalty": pick("frequency_penalty"),
            "presence_penalty": pick("presence_penalty"),
            "max_tokens": pick("max_tokens"),
            "stop": pick("stop_sequences"),
        }
        kwargs.update({key: value for key, value in optional.items() if value is not None})
        kwargs.update(default.provider_extras)
        kwargs.update(config.provider_extras)
        return kwargs

    @staticmethod
    def _parse_structured(text: str, schema: type) -> BaseModel:
        try:
            return schema.model_validate(require_object(text))
        except ValueError as e:
            logger.error(f"Structured output did not match {schema.__name__}: {str(e)}")
            raise StructuredOutputError(f"Structured output did not match {schema.__name__}: {str(e)}")
