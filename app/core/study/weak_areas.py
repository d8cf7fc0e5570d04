"""
Weak area ranking from practice statistics and past assessment results.
"""
from typing import Dict, List, Optional, Sequence, Tuple

from app.core.study.categories import CATEGORY_LABELS, Category
from app.schemas.assessment import AssessmentResultRecord
from app.schemas.statistics import UserStatistics, WeakArea

HIGH_PRIORITY_BELOW = 50.0
MEDIUM_PRIORITY_BELOW = 70.0


def _priority(accuracy: float) -> str:
    if accuracy < HIGH_PRIORITY_BELOW:
        return "high"
    if accuracy < MEDIUM_PRIORITY_BELOW:
        return "medium"
    return "low"


def _assessment_accuracy(results: Sequence[AssessmentResultRecord]) -> Dict[Category, float]:
    totals: Dict[Category, Tuple[int, int]] = {}
    for result in results:
        for category, tally in result.category_stats.items():
            total, correct = totals.get(category, (0, 0))
            totals[category] = (total + tally.total, correct + tally.correct)
    return {
        category: round(correct / total * 100, 1)
        for category, (total, correct) in totals.items()
        if total > 0
    }


def rank_weak_areas(
    stats: UserStatistics,
    results: Sequence[AssessmentResultRecord] = ()
) -> List[WeakArea]:
    """
    Categories with any recorded attempt, weakest first.

    A category's standing is its practice accuracy averaged with its accuracy
    across past assessments, when it has both.
    """
    exam_accuracy = _assessment_accuracy(results)
    ranked: List[Tuple[float, int, WeakArea]] = []

    for category in Category:
        tally = stats.category_stats.get(category)
        attempts = tally.total if tally else 0
        mock_accuracy: Optional[float] = exam_accuracy.get(category)
        if attempts == 0 and mock_accuracy is None:
            continue

        scores = []
        if attempts > 0 and tally is not None:
            scores.append(tally.accuracy)
        if mock_accuracy is not None:
            scores.append(mock_accuracy)
        combined = round(sum(scores) / len(scores), 1)

        ranked.append((combined, -attempts, WeakArea(
            category=category,
            label=CATEGORY_LABELS[category],
            accuracy=tally.accuracy if tally else 0.0,
            total_attempts=attempts,
            mock_exam_accuracy=mock_accuracy,
            priority=_priority(combined),
        )))

    ranked.sort(key=lambda item: (item[0], item[1]))
    return [area for _, _, area in ranked]
