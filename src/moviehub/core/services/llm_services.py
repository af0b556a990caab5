"""LLM service implementations."""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import LLMServiceError, MalformedResponseError
from ..interfaces import ILLMService
from ..models import Intent

INTENT_TYPES = ("search_movies", "get_movie_details", "compare_movies", "recommend_movies")
STRATEGY_TYPES = ("direct_search", "genre_search", "popular_search", "director_search")


class BaseLLMService(ILLMService, LoggerMixin, ABC):
    """Base LLM service with common functionality."""

    def __init__(self, config: Config):
        """Initialize LLM service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._llm_config = config.llm

    async def analyze_intent(self, query: str, context: str = "movie_search") -> Intent:
        """Classify the intent of a query with the LLM.

        Args:
            query: User query.
            context: Free-form hint about the calling feature.

        Returns:
            Parsed intent.

        Raises:
            LLMServiceError: If the LLM request fails.
            MalformedResponseError: If the answer is not a valid intent.
        """
        response_text = await self._make_llm_request(
            self._create_intent_system_prompt(), self._create_intent_user_prompt(query, context)
        )
        intent = self._parse_intent_response(response_text)
        self.logger.info(f"LLM intent for '{query}': {intent.type} ({intent.confidence:.2f})")
        return intent

    async def generate_summary(
        self, title: str, plot: Optional[str] = None, genres: Optional[List[str]] = None
    ) -> str:
        prompt = (
            f"Write a concise summary of about 100 characters for the movie "
            f"'{title}'.{self._describe(plot, genres)}"
        )
        text = await self._make_llm_request(
            "You are a film critic who writes short, spoiler-free summaries.", prompt
        )
        return text.strip()

    async def generate_highlights(
        self, title: str, plot: Optional[str] = None, genres: Optional[List[str]] = None
    ) -> List[str]:
        prompt = (
            f"List exactly 3 highlights of the movie '{title}', one per line, "
            f"without numbering.{self._describe(plot, genres)}"
        )
        text = await self._make_llm_request(
            "You are a film critic who points out what makes a movie worth watching.", prompt
        )
        bullet = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")
        lines = [bullet.sub("", line).strip() for line in text.splitlines()]
        return [line for line in lines if line][:3]

    async def generate_similar_movies(
        self, title: str, genres: Optional[List[str]] = None
    ) -> List[str]:
        genre_text = f" Its genres are: {', '.join(genres)}." if genres else ""
        prompt = (
            f"Suggest 5 movies similar to '{title}'.{genre_text} "
            f"Answer with the titles only, separated by commas."
        )
        text = await self._make_llm_request("You are a movie recommendation expert.", prompt)
        titles = [item.strip().strip("\"'") for item in re.split(r"[,\n]", text)]
        return [item for item in titles if item][:5]

    @staticmethod
    def _describe(plot: Optional[str], genres: Optional[List[str]]) -> str:
        parts = []
        if plot:
            parts.append(f" Plot: {plot}")
        if genres:
            parts.append(f" Genres: {', '.join(genres)}.")
        return "".join(parts)

    @abstractmethod
    async def _make_llm_request(self, system_prompt: str, user_prompt: str) -> str:
        """Make request to LLM service.

        Args:
            system_prompt: System prompt.
            user_prompt: User prompt.

        Returns:
            LLM response text.
        """
        pass

    def _create_intent_system_prompt(self) -> str:
        """Create system prompt for intent analysis.

        Returns:
            System prompt text.
        """
        return f"""You analyze movie-related questions and decide what the user wants.

IMPORTANT: You must respond with valid JSON in exactly this format:
{{
    "type": one of {list(INTENT_TYPES)},
    "confidence": float_between_0_and_1,
    "reasoning": "string",
    "extractedEntities": {{
        "genres": ["string"],
        "years": [integer],
        "actors": ["string"],
        "directors": ["string"],
        "keywords": ["string"]
    }},
    "searchStrategy": {{
        "type": one of {list(STRATEGY_TYPES)},
        "parameters": {{}}
    }}
}}

Rules:
- get_movie_details: the user asks about one specific movie
- compare_movies: the user wants two or more movies compared
- recommend_movies: the user asks for suggestions
- search_movies: anything else
- Use genre_search only when a genre is named, director_search only when a director is named,
  popular_search for popular, trending or classic movies, otherwise direct_search."""

    def _create_intent_user_prompt(self, query: str, context: str) -> str:
        return f"Context: {context}\nQuery: {query}\n\nRespond with the required JSON format."

    def _parse_intent_response(self, response_text: str) -> Intent:
        """Parse LLM intent response.

        Args:
            response_text: Raw LLM response.

        Returns:
            Validated intent.

        Raises:
            MalformedResponseError: If parsing fails.
        """
        json_match = re.search(r"\{.*\}", response_text, re.DOTALL)
        json_text = json_match.group(0) if json_match else response_text

        try:
            data: Dict[str, Any] = json.loads(json_text)
            return Intent.model_validate(data)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            raise MalformedResponseError(f"Failed to parse LLM intent response: {e}") from e


class OpenAILLMService(BaseLLMService):
    """OpenAI LLM service implementation."""

    async def _make_llm_request(self, system_prompt: str, user_prompt: str) -> str:
        """Make request to OpenAI API.

        Args:
            system_prompt: System prompt.
            user_prompt: User prompt.

        Returns:
            LLM response text.
        """
        try:
            import openai
        except ImportError:
            raise LLMServiceError("OpenAI package not installed. Install with: pip install openai")

        try:
            client = openai.AsyncOpenAI(api_key=self._llm_config.api_key)
            response = await client.chat.completions.create(
                model=self._llm_config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self._llm_config.max_tokens,
                temperature=self._llm_config.temperature,
                timeout=self._llm_config.timeout,
            )
        except Exception as e:
            raise LLMServiceError(f"OpenAI API request failed: {e}") from e

        content = response.choices[0].message.content
        if content is None:
            raise LLMServiceError("OpenAI API returned empty content")
        return content


class AnthropicLLMService(BaseLLMService):
    """Anthropic (Claude) LLM service implementation."""

    async def _make_llm_request(self, system_prompt: str, user_prompt: str) -> str:
        """Make request to Anthropic API.

        Args:
            system_prompt: System prompt.
            user_prompt: User prompt.

        Returns:
            LLM response text.
        """
        try:
            import anthropic
        except ImportError:
            raise LLMServiceError(
                "Anthropic package not installed. Install with: pip install anthropic"
            )

        try:
            client = anthropic.AsyncAnthropic(api_key=self._llm_config.api_key)
            response = await client.messages.create(
                model=self._llm_config.model,
                max_tokens=self._llm_config.max_tokens,
                temperature=self._llm_config.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                timeout=self._llm_config.timeout,
            )
        except Exception as e:
            raise LLMServiceError(f"Anthropic API request failed: {e}") from e

        content_block = response.content[0]
        if hasattr(content_block, "text"):
            return content_block.text
        raise LLMServiceError("Anthropic API returned unexpected content type")
