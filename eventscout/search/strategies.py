"""Search strategy generation from industry/topic or a free-text keyword."""

from __future__ import annotations

import logging
from typing import List

from eventscout.exceptions import OptimizationUnavailable, ValidationError
from eventscout.search.lexicon import DEFAULT_EVENT_TYPES, INDUSTRY_STRATEGIES, TOPIC_STRATEGIES
from eventscout.search.optimizer import TextOptimizer
from eventscout.search.schemas import OptimizationSuggestion, SearchStrategy

logger = logging.getLogger(__name__)


def generic_keyword(industry: str, topic: str) -> str:
    return f"{topic} {industry}"


def rule_based_suggestion(industry: str, topic: str) -> OptimizationSuggestion:
    """Topic table, then industry table, then the generic '{topic} {industry}' template."""
    audience = [industry.lower(), topic.lower()]

    topic_entry = TOPIC_STRATEGIES.get(topic)
    if topic_entry:
        keywords = topic_entry["keywords"]
        return OptimizationSuggestion(
            primary_keyword=keywords[0],
            alternate_keywords=list(keywords[1:]),
            event_types=list(topic_entry.get("event_types", DEFAULT_EVENT_TYPES)),
            audience_keywords=audience,
            reasoning="Topic-specific optimization",
        )

    industry_entry = INDUSTRY_STRATEGIES.get(industry)
    if industry_entry:
        keywords = industry_entry["keywords"]
        return OptimizationSuggestion(
            primary_keyword=keywords[0],
            alternate_keywords=list(keywords[1:]),
            classification_id=industry_entry.get("classification_id"),
            classification_name=industry_entry.get("classification_name"),
            event_types=list(industry_entry.get("event_types", DEFAULT_EVENT_TYPES)),
            audience_keywords=audience,
            reasoning="Industry-specific optimization",
        )

    return OptimizationSuggestion(
        primary_keyword=generic_keyword(industry, topic),
        alternate_keywords=[f"{industry} conference", f"{topic} summit", f"{industry} {topic}"],
        event_types=list(DEFAULT_EVENT_TYPES),
        audience_keywords=audience,
        reasoning="Default optimization",
    )


def build_strategies(suggestion: OptimizationSuggestion, industry: str, topic: str) -> List[SearchStrategy]:
    """
    Expand a suggestion into a priority-ordered strategy list.

    Primary keyword first, then each alternate, then one strategy per audience
    keyword, with the generic template always appended last.
    """
    def make(keyword: str, priority: int) -> SearchStrategy:
        return SearchStrategy(
            keyword=keyword,
            classification_name=suggestion.classification_name,
            classification_id=suggestion.classification_id,
            event_types=list(suggestion.event_types),
            priority=priority,
        )

    strategies = [make(suggestion.primary_keyword, 1)]
    for index, keyword in enumerate(suggestion.alternate_keywords):
        strategies.append(make(keyword, index + 2))

    for audience in suggestion.audience_keywords:
        strategies.append(make(f"{audience} conference", len(strategies) + 1))

    strategies.append(
        SearchStrategy(
            keyword=generic_keyword(industry, topic),
            event_types=list(DEFAULT_EVENT_TYPES),
            priority=len(strategies) + 1,
        )
    )

    return sorted(strategies, key=lambda s: s.priority)


class StrategyGenerator:
    """Turns a request's industry/topic or keyword into search strategies."""

    def __init__(self, optimizer: TextOptimizer | None = None):
        self.optimizer = optimizer

    async def suggest(self, industry: str, topic: str) -> OptimizationSuggestion:
        """Optimizer suggestion when available, rule tables otherwise. Never raises."""
        if self.optimizer is not None:
            try:
                return await self.optimizer.optimize(industry, topic)
            except OptimizationUnavailable as e:
                logger.info(f"Optimizer unavailable ({e}), using rule-based strategies")
            except Exception as e:
                logger.warning(f"Optimizer failed unexpectedly ({e}), using rule-based strategies")
        return rule_based_suggestion(industry, topic)

    async def generate(
        self,
        industry: str | None = None,
        topic: str | None = None,
        keyword: str | None = None,
    ) -> List[SearchStrategy]:
        """
        Generate the ordered strategy list for one search.

        Raises:
            ValidationError: If neither industry+topic nor a keyword is given
        """
        industry = (industry or "").strip()
        topic = (topic or "").strip()

        if not (industry and topic):
            keyword = (keyword or "").strip()
            if not keyword:
                raise ValidationError("Provide both industry and topic, or a keyword")
            return [SearchStrategy(keyword=keyword, priority=1)]

        suggestion = await self.suggest(industry, topic)
        strategies = build_strategies(suggestion, industry, topic)
        logger.info(
            f"Generated {len(strategies)} strategies for '{topic}' / '{industry}' ({suggestion.source})"
        )
        return strategies
