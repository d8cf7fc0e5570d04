"""
Study advice generator using an LLM to turn statistics into a short text.
"""
import logging
from typing import Optional

from langchain_core.messages import SystemMessage, HumanMessage

from app.core.config import settings
from app.core.llm_config import LLMFactory
from app.core.study.categories import CATEGORY_LABELS, Category
from app.core.agents.advice.prompts import (
    ADVICE_SYSTEM_PROMPT,
    ADVICE_USER_PROMPT_TEMPLATE,
    FALLBACK_ADVICE_TEMPLATE,
    NO_DATA_ADVICE,
)
from app.schemas.statistics import StudyAdviceResponse, UserStatistics

logger = logging.getLogger(__name__)


class StudyAdvisor:
    """
    Generates personalized study advice.

    The LLM output is treated as an opaque string. When the model is not
    configured or the call fails, a deterministic advice text is returned.
    """

    def __init__(self, llm=None):
        self._llm = llm

    @property
    def llm(self):
        if self._llm is None:
            self._llm = LLMFactory.create_llm(temperature=0.7, max_tokens=500)
        return self._llm

    def generate_advice(self, stats: UserStatistics) -> StudyAdviceResponse:
        if stats.total_questions == 0:
            return StudyAdviceResponse(advice=NO_DATA_ADVICE, generated=False)

        if self._llm is None and not settings.OPENAI_API_KEY:
            logger.info("OPENAI_API_KEY not set, using fallback advice")
            return StudyAdviceResponse(advice=self._fallback_advice(stats), generated=False)

        try:
            messages = [
                SystemMessage(content=ADVICE_SYSTEM_PROMPT),
                HumanMessage(content=self._build_prompt(stats)),
            ]
            response = self.llm.invoke(messages)
            advice = str(response.content).strip()
            if not advice:
                raise ValueError("empty advice")

            logger.info(f"Generated study advice for user {stats.user_id}")
            return StudyAdviceResponse(advice=advice, generated=True)

        except Exception as e:
            logger.error(f"Error generating study advice: {e}")
            return StudyAdviceResponse(advice=self._fallback_advice(stats), generated=False)

    def _build_prompt(self, stats: UserStatistics) -> str:
        lines = []
        for category in Category:
            tally = stats.category_stats[category]
            lines.append(f"- {CATEGORY_LABELS[category]}: {tally.total}問、正答率{tally.accuracy}%")

        return ADVICE_USER_PROMPT_TEMPLATE.format(
            total_questions=stats.total_questions,
            accuracy=stats.accuracy,
            study_days=stats.study_days,
            current_streak=stats.current_streak,
            category_breakdown="\n".join(lines),
        )

    def _fallback_advice(self, stats: UserStatistics) -> str:
        """Point at the least accurate category that has been practiced."""
        weakest: Optional[Category] = None
        for category in Category:
            tally = stats.category_stats[category]
            if tally.total == 0:
                continue
            if weakest is None or tally.accuracy < stats.category_stats[weakest].accuracy:
                weakest = category

        if weakest is None:
            return NO_DATA_ADVICE

        return FALLBACK_ADVICE_TEMPLATE.format(
            accuracy=stats.accuracy,
            weakest_label=CATEGORY_LABELS[weakest],
            weakest_accuracy=stats.category_stats[weakest].accuracy,
        )
