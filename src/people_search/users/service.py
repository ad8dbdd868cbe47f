"""User profile extraction, storage and LLM-backed matching."""

import asyncio
import json
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..core.exceptions import (
    ExtractionError,
    LLMError,
    PeopleSearchError,
    StructuredOutputError,
    ValidationError,
)
from ..llm.models import (
    EmbeddingRequest,
    LLMModelCapability,
    LLMModelConfig,
    LLMRequest,
    LLMTask,
    ModelUseCase,
    StructuredOutputRequest,
)
from ..llm.registry import ModelRegistry
from ..llm.service import LLMService
from ..utils.profile_text import user_to_searchable_text
from ..utils.validators import has_required_profile_fields
from ..vector_store.models import (
    AddDocumentsRequest,
    StoreDocument,
    VectorSearchResponse,
    VectorStoreProvider,
)
from ..vector_store.service import VectorStoreService
from .models import ExtractedUser, RelevancyJudgment, UserProfile, UserRelevancy

logger = logging.getLogger(__name__)

NO_MATCHES_ANSWER = (
    "I couldn't find any relevant users matching your query. Please try a different "
    "search term or check if users have been added to the system."
)

EXTRACTION_INSTRUCTIONS = """
You are an expert data extraction agent specialized in extracting user information from various text formats.

Your task is to:
1. Carefully analyze the provided text
2. Extract relevant user information according to the provided schema
3. Return structured data that matches the schema exactly
4. If a field cannot be confidently determined, return null for it
5. Be precise and conservative - only extract information that is clearly stated

The text may contain:
- Personal information (name, email, location)
- Professional details (job title, company, experience)
- Skills and technologies
- Additional notes or context

Text to analyze:
{text}
"""

RELEVANCY_INSTRUCTIONS = """
A user searched a people directory for: "{query}"

Candidate profile:
{profile}

Structured fields:
{metadata}

Decide how well this person matches the search.
- HIGH: clearly satisfies the main requirements of the query
- MID: partially matches or matches loosely related requirements
- LOW: does not match

Return the relevancy and a one sentence reason.
"""

EXPLANATION_INSTRUCTIONS = """
A user searched a people directory for: "{query}"

This profile was returned as a match:
{profile}

In one or two sentences, explain specifically why this person matches the search.
Mention the concrete skills, role, location or experience that fit. Do not invent facts.
"""

FINAL_ANSWER_INSTRUCTIONS = """
You are an intelligent search assistant for a user profile database. A user has searched for: "{query}"

I found {count} user profile(s) using vector similarity search:

{profiles}

IMPORTANT: The similarity scores are based on vector embeddings and may not always reflect true relevance. Please carefully analyze each user profile to determine if they actually match the query requirements.

Instructions:
1. Carefully examine each user profile to verify if they truly match the query requirements
2. Identify which users (if any) best match the query requirements
3. Provide specific details about the matching users (names, locations, skills, experience, etc.)
4. If multiple users match, present them in order of actual relevance (not just similarity score)
5. If no users truly match the query, clearly state this and suggest alternative search terms
6. Keep the response natural, conversational, and helpful

Your response:"""

# Relevancy judgments are short; a cheap completion model is enough
RELEVANCY_USE_CASE = ModelUseCase(
    capability=LLMModelCapability.COMPLETION,
    task=LLMTask.METADATA_SEARCH,
    requires_function_calling=True,
    max_budget=0.01,
)


class UserService:
    """
    Turns raw profile text into stored, searchable profiles and asks the
    language model to judge and explain search matches.
    """

    def __init__(self, llm_service: LLMService, vector_store: VectorStoreService):
        """
        Initialize user service.

        Args:
            llm_service: Model access for extraction, embeddings and judgments
            vector_store: Where profile documents are stored
        """
        self.llm_service = llm_service
        self.vector_store = vector_store
        self._users: List[UserProfile] = []

    async def extract_user_from_plain_text(self, text: str) -> UserProfile:
        """
        Extract a profile from free text with the language model.

        Args:
            text: Free-form description of a person

        Returns:
            Extracted profile (fields the model could not determine are None)

        Raises:
            ValidationError: If the text is empty
            ExtractionError: If the model call or parsing fails
        """
        if not text or not text.strip():
            raise ValidationError("Text to extract from cannot be empty")

        logger.info(f"Extracting user data from text ({len(text)} chars)")

        try:
            extracted = await self.llm_service.generate_structured_output(
                StructuredOutputRequest(
                    prompt=EXTRACTION_INSTRUCTIONS.format(text=text),
                    schema=ExtractedUser,
                    priority=[ModelRegistry.GPT_4O, ModelRegistry.GPT_4],
                    config=LLMModelConfig(temperature=0, max_tokens=2000),
                )
            )
        except Exception as e:
            logger.error(f"Failed to extract user data: {str(e)}")
            raise ExtractionError(f"Failed to extract user data: {str(e)}")

        user = extracted.to_user_profile()
        logger.info(f"Successfully extracted user data for: {user.name}")
        return user

    async def create_user_embedding(self, user: UserProfile) -> List[float]:
        """Embed a profile's searchable text with the large embedding model."""
        try:
            logger.info(f"Creating embedding for user: {user.name}")
            response = await self.llm_service.execute_embedding(
                EmbeddingRequest(
                    input=user_to_searchable_text(user),
                    priority=[ModelRegistry.OPENAI_EMBEDDING_LARGE],
                )
            )
            return response.embeddings[0]
        except Exception as e:
            logger.error(f"Error creating user embedding: {str(e)}")
            raise LLMError(f"Failed to create embedding: {str(e)}")

    async def save_user(self, user: UserProfile) -> Optional[UserProfile]:
        """
        Store a profile in the vector store.

        Profiles without a usable name, role and location are skipped.

        Args:
            user: Profile to save

        Returns:
            The saved profile with uuid and timestamps, or None if skipped

        Raises:
            PeopleSearchError: If the vector store rejects the profile
        """
        if not has_required_profile_fields(user):
            logger.warning(f"Incomplete user data, cannot save: {json.dumps(user.to_dict(), default=str)}")
            return None

        now = datetime.now()
        user = replace(
            user,
            uuid=user.uuid or str(uuid.uuid4()),
            created_at=user.created_at or now,
            updated_at=now
        )

        logger.info(f"Saving user {user.name}({user.uuid}) via vector store...")

        try:
            await self.vector_store.add_documents(
                AddDocumentsRequest(
                    documents=[self.user_to_document(user)],
                    provider=VectorStoreProvider.IN_MEMORY,
                )
            )
        except Exception as e:
            logger.error(f"Failed to save user: {str(e)}")
            raise PeopleSearchError(f"Failed to save user via vector store: {str(e)}")

        self._remember(user)
        logger.info(f"Successfully saved user {user.name}({user.uuid})")
        return user

    async def save_users(self, users: Sequence[UserProfile]) -> List[UserProfile]:
        """
        Save profiles concurrently.

        A profile the vector store rejects is logged and left out; the others
        are still saved.

        Returns:
            Only the profiles actually stored
        """
        results = await asyncio.gather(*(self.save_user(user) for user in users), return_exceptions=True)

        saved = []
        for user, result in zip(users, results):
            if isinstance(result, PeopleSearchError):
                logger.error(f"Skipping user {user.name}: {str(result)}")
            elif isinstance(result, BaseException):
                raise result
            elif result is not None:
                saved.append(result)
        return saved

    def _remember(self, user: UserProfile) -> None:
        """Record a saved profile, replacing any earlier copy with the same uuid."""
        for index, existing in enumerate(self._users):
            if existing.uuid == user.uuid:
                self._users[index] = user
                return
        self._users.append(user)

    async def get_user_by_id(self, id: str) -> Optional[UserProfile]:
        """Find a saved profile by source id or uuid."""
        for user in self._users:
            if user.id == id or user.uuid == id:
                return user
        return None

    async def get_all_users(self) -> List[UserProfile]:
        return list(self._users)

    async def user_relevancy_to_query(
        self,
        metadata: Dict[str, Any],
        page_content: str,
        query: str
    ) -> UserRelevancy:
        """
        Ask the model how well a stored profile matches a query.

        A reply that cannot be parsed counts as LOW.
        """
        prompt = RELEVANCY_INSTRUCTIONS.format(
            query=query,
            profile=page_content,
            metadata=json.dumps(metadata, default=str, indent=2),
        )

        try:
            judgment = await self.llm_service.generate_structured_output(
                StructuredOutputRequest(
                    prompt=prompt,
                    schema=RelevancyJudgment,
                    use_case=RELEVANCY_USE_CASE,
                    config=LLMModelConfig(temperature=0, max_tokens=200),
                )
            )
        except StructuredOutputError as e:
            logger.warning(f"Unparseable relevancy for {metadata.get('name')}: {str(e)}")
            return UserRelevancy.LOW

        logger.debug(f"Relevancy of {metadata.get('name')} to '{query}': {judgment.relevancy.value}")
        return judgment.relevancy

    async def get_user_match_explanation(
        self,
        metadata: Dict[str, Any],
        page_content: str,
        query: str
    ) -> str:
        """Short natural-language reason why a profile matches a query."""
        explanation = await self.llm_service.generate_text(
            LLMRequest(
                prompt=EXPLANATION_INSTRUCTIONS.format(query=query, profile=page_content),
                priority=[ModelRegistry.GPT_4O, ModelRegistry.GPT_4],
                config=LLMModelConfig(temperature=0.3, max_tokens=200),
            )
        )
        return explanation.strip()

    async def get_users_final_answer(
        self,
        query: str,
        results: Sequence[VectorSearchResponse]
    ) -> str:
        """
        Summarize search hits into a conversational answer.

        Args:
            query: The user's search
            results: Hits that survived relevancy filtering

        Returns:
            Final answer text

        Raises:
            LLMError: If answer generation fails
        """
        logger.info(f"Generating final answer for query: '{query}'")

        if not results:
            return NO_MATCHES_ANSWER

        logger.info(f"Processing {len(results)} user profiles...")

        profiles = "\n".join(
            f"--- User Profile {index} (Similarity Score: {round(result.score * 100)}%) ---\n{result.text}\n"
            for index, result in enumerate(results, 1)
        )
        prompt = FINAL_ANSWER_INSTRUCTIONS.format(query=query, count=len(results), profiles=profiles)

        try:
            answer = await self.llm_service.generate_text(
                LLMRequest(
                    prompt=prompt,
                    priority=[ModelRegistry.GPT_4O, ModelRegistry.GPT_4],
                    config=LLMModelConfig(temperature=0.3, max_tokens=1000),
                )
            )
        except Exception as e:
            logger.error(f"Failed to generate final answer: {str(e)}")
            raise LLMError(f"Failed to generate final answer: {str(e)}")

        logger.info("Final answer generated successfully")
        return answer.strip()

    @staticmethod
    def user_to_document(user: UserProfile) -> StoreDocument:
        """Searchable text plus metadata for the vector store."""
        return StoreDocument(
            page_content=user_to_searchable_text(user),
            metadata=user.to_metadata()
        )
