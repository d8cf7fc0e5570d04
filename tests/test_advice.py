from types import SimpleNamespace

from app.core.agents.advice import StudyAdvisor
from app.core.study.categories import Category
from app.core.study.statistics_updater import initial_statistics
from app.schemas.statistics import CategoryTally


class FakeLLM:
    def __init__(self, content="毎日10問ずつ民法を復習しましょう。", error=None):
        self.content = content
        self.error = error
        self.messages = None

    def invoke(self, messages):
        self.messages = messages
        if self.error:
            raise self.error
        return SimpleNamespace(content=self.content)


def practiced_stats():
    base = initial_statistics("user-1")
    category_stats = dict(base.category_stats)
    category_stats[Category.MINPOU] = CategoryTally(total=10, correct=3)
    category_stats[Category.ZEI] = CategoryTally(total=10, correct=8)
    return base.model_copy(update={
        "category_stats": category_stats,
        "total_questions": 20,
        "correct_answers": 11,
        "study_days": 4,
    })


def test_no_statistics_gives_starter_advice():
    llm = FakeLLM()
    response = StudyAdvisor(llm=llm).generate_advice(initial_statistics("user-1"))
    assert response.generated is False
    assert llm.messages is None


def test_generated_advice_is_returned_verbatim():
    llm = FakeLLM()
    response = StudyAdvisor(llm=llm).generate_advice(practiced_stats())

    assert response.generated is True
    assert response.advice == "毎日10問ずつ民法を復習しましょう。"
    prompt = llm.messages[1].content
    assert "総問題数: 20問" in prompt
    assert "民法等: 10問、正答率30.0%" in prompt


def test_llm_failure_falls_back_to_weakest_category():
    response = StudyAdvisor(llm=FakeLLM(error=RuntimeError("timeout"))).generate_advice(practiced_stats())

    assert response.generated is False
    assert "民法等" in response.advice


def test_missing_api_key_uses_fallback():
    response = StudyAdvisor().generate_advice(practiced_stats())
    assert response.generated is False
    assert "民法等" in response.advice
