"""Optional OpenAI-backed search keyword optimizer."""

from __future__ import annotations

import json
import logging
import re
from typing import List, Protocol

from openai import AsyncOpenAI

from eventscout.exceptions import OptimizationUnavailable
from eventscout.search.schemas import OptimizationSuggestion

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert at optimizing search terms for event discovery platforms. "
    "Your job is to transform a user's industry and speaking topic into the most effective "
    "search terms for finding relevant speaking opportunities and conferences."
)

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class TextOptimizer(Protocol):
    """Anything that can turn (industry, topic) into a keyword suggestion."""

    async def optimize(self, industry: str, topic: str) -> OptimizationSuggestion:
        ...


def build_prompt(industry: str, topic: str) -> str:
    return f"""Please optimize these search terms for finding speaking opportunities:

Industry: "{industry}"
Speaking Topic: "{topic}"

Please provide:
1. Primary keyword (most important search term)
2. Alternative keywords (2-3 variations)
3. Ticketmaster classification id, if one clearly applies
4. Event type suggestions (conference, summit, workshop, etc.)
5. Target audience keywords

Format your response as JSON:
{{
  "primaryKeyword": "string",
  "alternativeKeywords": ["string1", "string2", "string3"],
  "classificationId": "string or null",
  "eventTypes": ["string1", "string2"],
  "audienceKeywords": ["string1", "string2"],
  "reasoning": "brief explanation of optimization strategy"
}}"""


def _string_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


def parse_suggestion(content: str | None) -> OptimizationSuggestion:
    """
    Parse the model's reply into an OptimizationSuggestion.

    Missing list fields stay empty; nothing is invented to pad them.

    Raises:
        OptimizationUnavailable: If no JSON object or no primary keyword is present
    """
    match = _JSON_BLOCK.search(content or "")
    if not match:
        raise OptimizationUnavailable("Optimizer reply contained no JSON object")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise OptimizationUnavailable(f"Optimizer reply was not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise OptimizationUnavailable("Optimizer reply was not a JSON object")

    primary = str(data.get("primaryKeyword") or "").strip()
    if not primary:
        raise OptimizationUnavailable("Optimizer reply had no primaryKeyword")

    classification = data.get("classificationId") or data.get("categoryId")
    return OptimizationSuggestion(
        primary_keyword=primary,
        alternate_keywords=_string_list(data.get("alternativeKeywords")),
        classification_id=str(classification) if classification else None,
        event_types=_string_list(data.get("eventTypes")),
        audience_keywords=_string_list(data.get("audienceKeywords")),
        reasoning=str(data.get("reasoning") or ""),
        source="AI",
    )


class OpenAIOptimizer:
    """Keyword optimizer backed by OpenAI chat completions."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        timeout: float = 10.0,
        client: AsyncOpenAI | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def optimize(self, industry: str, topic: str) -> OptimizationSuggestion:
        """
        Ask the model for a structured keyword suggestion.

        Raises:
            OptimizationUnavailable: On a missing key, an API failure or an unusable reply
        """
        if not self.api_key:
            raise OptimizationUnavailable("OPENAI_API_KEY is not configured")

        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(industry, topic)},
                ],
                max_tokens=300,
                temperature=0.7,
            )
            content = response.choices[0].message.content
        except Exception as e:
            raise OptimizationUnavailable(f"OpenAI request failed: {e}") from e

        suggestion = parse_suggestion(content)
        logger.info(f"AI optimization for '{topic}' / '{industry}': primary '{suggestion.primary_keyword}'")
        return suggestion
