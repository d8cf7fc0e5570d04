from datetime import datetime, timezone

from app.core.study.categories import Category
from app.core.study.statistics_updater import initial_statistics
from app.core.study.weak_areas import rank_weak_areas
from app.schemas.assessment import AssessmentKind, AssessmentResultRecord
from app.schemas.statistics import CategoryTally


def stats_with(**tallies):
    base = initial_statistics("user-1")
    category_stats = dict(base.category_stats)
    for name, (total, correct) in tallies.items():
        category_stats[Category(name)] = CategoryTally(total=total, correct=correct)
    return base.model_copy(update={"category_stats": category_stats})


def result_with(**tallies):
    return AssessmentResultRecord(
        id=1,
        session_id="s1",
        kind=AssessmentKind.MOCK_EXAM,
        score=0,
        total_questions=sum(t[0] for t in tallies.values()),
        percentage=0,
        pass_cutoff=35,
        is_passed=False,
        time_used_seconds=100,
        category_stats={Category(name): CategoryTally(total=t, correct=c) for name, (t, c) in tallies.items()},
        incorrect_question_ids=[],
        completed_at=datetime(2024, 4, 1, tzinfo=timezone.utc),
    )


def test_no_data_gives_no_weak_areas():
    assert rank_weak_areas(initial_statistics("user-1")) == []


def test_weakest_category_comes_first():
    stats = stats_with(minpou=(10, 3), zei=(10, 9), hourei=(10, 6))

    areas = rank_weak_areas(stats)

    assert [a.category for a in areas] == [Category.MINPOU, Category.HOUREI, Category.ZEI]
    assert [a.priority for a in areas] == ["high", "medium", "low"]
    assert areas[0].label == "民法等"
    assert areas[0].mock_exam_accuracy is None


def test_assessment_results_are_blended_in():
    stats = stats_with(minpou=(10, 8), zei=(10, 6))
    results = [result_with(minpou=(10, 2))]

    areas = rank_weak_areas(stats, results)

    # minpou: (80 + 20) / 2 = 50 sits below zei's 60
    assert areas[0].category == Category.MINPOU
    assert areas[0].mock_exam_accuracy == 20.0
    assert areas[0].priority == "medium"


def test_category_seen_only_in_assessments_is_included():
    areas = rank_weak_areas(initial_statistics("user-1"), [result_with(takkengyouhou=(4, 1))])
    assert len(areas) == 1
    assert areas[0].category == Category.TAKKENGYOUHOU
    assert areas[0].total_attempts == 0
    assert areas[0].priority == "high"
