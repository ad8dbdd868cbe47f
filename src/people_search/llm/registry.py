"""Static model catalogue and model selection."""

import logging
from typing import Iterable, List, Optional

from .models import (
    LLMModel,
    LLMModelCapability,
    LLMProvider,
    LLMTask,
    ModelCost,
    ModelUseCase,
    OpenAIChatModels,
    OpenAIEmbeddingModels,
)

logger = logging.getLogger(__name__)

_Cap = LLMModelCapability
_Task = LLMTask


class ModelRegistry:
    """Known models. Costs are USD per 1K tokens."""

    GPT_4O = LLMModel(
        id=OpenAIChatModels.GPT_4O.value,
        name="GPT 4o",
        provider=LLMProvider.OPENAI,
        capabilities=(_Cap.COMPLETION, _Cap.CHAT, _Cap.VISION),
        tasks=(_Task.FUNCTION_CALL, _Task.TOOL_USE, _Task.CODE_GEN, _Task.RAG, _Task.METADATA_SEARCH),
        cost=ModelCost(input_token=0.005, output_token=0.015),
        context_window=128000,
        max_output_tokens=4096,
        supports_streaming=True,
        supports_vision=True,
        supports_function_calling=True,
    )

    GPT_4 = LLMModel(
        id=OpenAIChatModels.GPT_4.value,
        name="GPT-4",
        provider=LLMProvider.OPENAI,
        capabilities=(_Cap.COMPLETION, _Cap.CHAT, _Cap.VISION),
        tasks=(_Task.FUNCTION_CALL, _Task.TOOL_USE, _Task.CODE_GEN, _Task.RAG),
        cost=ModelCost(input_token=0.03, output_token=0.06),
        context_window=8192,
        max_output_tokens=4096,
        supports_streaming=True,
        supports_vision=True,
        supports_function_calling=True,
    )

    GPT_4_TURBO = LLMModel(
        id=OpenAIChatModels.GPT_4_TURBO.value,
        name="GPT 4 Turbo",
        provider=LLMProvider.OPENAI,
        capabilities=(_Cap.COMPLETION, _Cap.CHAT, _Cap.VISION),
        tasks=(_Task.FUNCTION_CALL, _Task.TOOL_USE, _Task.CODE_GEN, _Task.RAG),
        cost=ModelCost(input_token=0.01, output_token=0.03),
        context_window=128000,
        max_output_tokens=4096,
        supports_streaming=True,
        supports_vision=True,
        supports_function_calling=True,
    )

    GPT_35_TURBO = LLMModel(
        id=OpenAIChatModels.GPT_35.value,
        name="GPT 3.5 Turbo",
        provider=LLMProvider.OPENAI,
        capabilities=(_Cap.COMPLETION,),
        tasks=(_Task.CODE_GEN, _Task.RAG, _Task.METADATA_SEARCH),
        cost=ModelCost(input_token=0.0015, output_token=0.002),
        context_window=16385,
        max_output_tokens=4096,
        supports_streaming=True,
        supports_vision=False,
        supports_function_calling=True,
    )

    OPENAI_EMBEDDING_SMALL = LLMModel(
        id=OpenAIEmbeddingModels.SMALL.value,
        name="OpenAI Text Embedding Small",
        provider=LLMProvider.OPENAI,
        capabilities=(_Cap.EMBEDDING,),
        tasks=(_Task.RAG, _Task.METADATA_SEARCH),
        cost=ModelCost(input_token=0.00002, output_token=0.0),
        context_window=8191,
    )

    OPENAI_EMBEDDING_LARGE = LLMModel(
        id=OpenAIEmbeddingModels.LARGE.value,
        name="OpenAI Text Embedding Large",
        provider=LLMProvider.OPENAI,
        capabilities=(_Cap.EMBEDDING,),
        tasks=(_Task.RAG, _Task.METADATA_SEARCH),
        cost=ModelCost(input_token=0.00013, output_token=0.0),
        context_window=8191,
    )

    @classmethod
    def all_models(cls) -> List[LLMModel]:
        """All registered models in declaration order."""
        return [value for value in vars(cls).values() if isinstance(value, LLMModel)]

    @classmethod
    def get(cls, model_id: str) -> Optional[LLMModel]:
        """Look up a model by its provider id (e.g. "gpt-4o")."""
        for model in cls.all_models():
            if model.id == model_id:
                return model
        return None


class ModelSelector:
    """
    Filter-and-score selection over a set of models.

    Ties always resolve to the model that appears first in the catalogue.
    """

    def __init__(self, models: Optional[Iterable[LLMModel]] = None):
        self.models: List[LLMModel] = list(models) if models is not None else ModelRegistry.all_models()

    def get_by_capability(self, capability: LLMModelCapability) -> List[LLMModel]:
        return [m for m in self.models if m.has_capability(capability)]

    def get_by_provider(self, provider: LLMProvider) -> List[LLMModel]:
        return [m for m in self.models if m.provider == provider]

    def get_by_task(self, task: LLMTask) -> List[LLMModel]:
        return [m for m in self.models if m.supports_task(task)]

    def get_by_capabilities(self, capabilities: Iterable[LLMModelCapability]) -> List[LLMModel]:
        required = list(capabilities)
        return [m for m in self.models if all(m.has_capability(c) for c in required)]

    def get_cheapest_by_capability_and_task(
        self,
        capability: LLMModelCapability,
        task: Optional[LLMTask] = None
    ) -> Optional[LLMModel]:
        """Lowest input+output price among models with the capability (and task)."""
        models = self.get_by_capability(capability)
        if task is not None:
            models = [m for m in models if m.supports_task(task)]

        if not models:
            return None

        # min() keeps the first of equal keys
        return min(models, key=lambda m: m.total_cost)

    def get_best_model_for_use_case(self, use_case: ModelUseCase) -> Optional[LLMModel]:
        """
        Pick the highest scoring model that satisfies a use case.

        Filters are applied in order: capability, task, vision, function
        calling, budget. A preferred provider narrows the candidates only
        when at least one of them comes from that provider.

        Args:
            use_case: Selection requirements

        Returns:
            Best model, or None when nothing qualifies
        """
        models = self.get_by_capability(use_case.capability)

        if use_case.task is not None:
            models = [m for m in models if m.supports_task(use_case.task)]

        if use_case.requires_vision:
            models = [m for m in models if m.supports_vision]

        if use_case.requires_function_calling:
            models = [m for m in models if m.supports_function_calling]

        if use_case.max_budget is not None:
            models = [m for m in models if m.total_cost <= use_case.max_budget]

        if use_case.preferred_provider is not None:
            preferred = [m for m in models if m.provider == use_case.preferred_provider]
            if preferred:
                models = preferred

        if not models:
            logger.debug(f"No model satisfies use case: {use_case}")
            return None

        # max() keeps the first of equal keys
        return max(models, key=self.calculate_model_score)

    @staticmethod
    def calculate_model_score(model: LLMModel) -> float:
        """Heuristic capability score; cheaper and more capable scores higher."""
        score = 0.0

        score += (model.context_window or 0) / 1000
        score += len(model.capabilities) * 10

        if model.supports_function_calling:
            score += 20
        if model.supports_vision:
            score += 15
        if model.supports_streaming:
            score += 5

        score -= model.total_cost * 100

        return score

    def get_models_for_scenario(self, scenario: str) -> List[LLMModel]:
        """
        Models ranked for a named scenario.

        Scenarios: "chat", "completion", "embedding", "vision",
        "function-calling". Any other name returns every model unranked.
        """
        def by_score(models: List[LLMModel]) -> List[LLMModel]:
            return sorted(models, key=self.calculate_model_score, reverse=True)

        if scenario == "chat":
            return by_score(self.get_by_capability(LLMModelCapability.CHAT))
        if scenario == "completion":
            return by_score(self.get_by_capability(LLMModelCapability.COMPLETION))
        if scenario == "embedding":
            return sorted(
                self.get_by_capability(LLMModelCapability.EMBEDDING),
                key=lambda m: m.cost.input_token if m.cost else 0.0
            )
        if scenario == "vision":
            return by_score(
                [m for m in self.get_by_capability(LLMModelCapability.VISION) if m.supports_vision]
            )
        if scenario == "function-calling":
            return by_score([m for m in self.models if m.supports_function_calling])

        return list(self.models)
