"""
Prompts for study advice generation.
"""

# System prompt for the study advisor
ADVICE_SYSTEM_PROMPT = "あなたは宅建試験の学習アドバイザーです。受験生の学習状況を分析し、効果的な学習方法を提案してください。"


# User prompt template built from the learner's statistics
ADVICE_USER_PROMPT_TEMPLATE = """以下の学習データを分析して、次に何を勉強すべきか具体的なアドバイスをしてください。

【学習データ】
- 総問題数: {total_questions}問
- 正答率: {accuracy}%
- 学習日数: {study_days}日
- 連続学習日数: {current_streak}日

【カテゴリ別成績】
{category_breakdown}

【アドバイスの要件】
1. 現在の学習状況の評価
2. 優先的に学習すべき分野
3. 具体的な学習方法の提案
4. 目標設定のアドバイス

200文字以内で簡潔にアドバイスしてください。"""


NO_DATA_ADVICE = "まだ学習データがありません。まずは各分野の問題を解いてみましょう。"

FALLBACK_ADVICE_TEMPLATE = (
    "現在の正答率は{accuracy}%です。"
    "特に「{weakest_label}」の正答率が{weakest_accuracy}%と低いため、"
    "解説を読み直しながら重点的に復習しましょう。"
    "毎日少しずつでも継続することが合格への近道です。"
)
