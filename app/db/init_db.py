"""
Database initialization and seeding.
"""
import logging

from sqlalchemy.orm import Session

from app.models.question import Question as QuestionModel
from app.schemas.question import Question
from app.services.question_service import QuestionService

logger = logging.getLogger(__name__)

# Demo questions; production pools are mirrored from the content service
SAMPLE_QUESTIONS = [
    Question(
        id="takken_001",
        category="takkengyouhou",
        text="宅地建物取引士証の有効期間として、正しいものはどれか。",
        options=["3年", "5年", "7年", "10年"],
        correct_option_index=1,
        explanation="宅地建物取引士証の有効期間は5年です。",
    ),
    Question(
        id="takken_002",
        category="takkengyouhou",
        text="宅地建物取引業の免許の有効期間として、正しいものはどれか。",
        options=["1年", "3年", "5年", "無期限"],
        correct_option_index=2,
        explanation="免許の有効期間は5年で、更新の申請が必要です。",
    ),
    Question(
        id="minpou_001",
        category="minpou",
        text="民法上の契約の成立について、正しいものはどれか。",
        options=[
            "契約の成立には必ず書面が必要である。",
            "契約は当事者の合意のみで成立する。",
            "契約の成立には公証人の立会いが必要である。",
            "契約は対価を伴わなければ成立しない。",
        ],
        correct_option_index=1,
        explanation="契約は原則として当事者の合意のみで成立します（諾成契約）。",
    ),
    Question(
        id="minpou_002",
        category="minpou",
        text="未成年者が法定代理人の同意を得ずにした契約について、正しいものはどれか。",
        options=[
            "当然に無効である。",
            "取り消すことができる。",
            "常に有効であり取り消せない。",
            "相手方のみが取り消せる。",
        ],
        correct_option_index=1,
        explanation="法定代理人の同意のない未成年者の法律行為は取り消すことができます。",
    ),
    Question(
        id="hourei_001",
        category="hourei",
        text="都市計画法上、市街化を抑制すべき区域はどれか。",
        options=["市街化区域", "市街化調整区域", "準都市計画区域", "非線引き区域"],
        correct_option_index=1,
        explanation="市街化調整区域は市街化を抑制すべき区域です。",
    ),
    Question(
        id="hourei_002",
        category="hourei",
        text="建築基準法上、原則として建築物の敷地が接しなければならない道路の幅員はどれか。",
        options=["2m以上", "4m以上", "6m以上", "8m以上"],
        correct_option_index=1,
        explanation="敷地は幅員4m以上の道路に2m以上接する必要があります。",
    ),
    Question(
        id="zei_001",
        category="zei",
        text="不動産取得税の課税主体として、正しいものはどれか。",
        options=["国", "都道府県", "市町村", "特別区のみ"],
        correct_option_index=1,
        explanation="不動産取得税は都道府県が課する税です。",
    ),
    Question(
        id="zei_002",
        category="zei",
        text="固定資産税の賦課期日として、正しいものはどれか。",
        options=["1月1日", "4月1日", "7月1日", "12月31日"],
        correct_option_index=0,
        explanation="固定資産税の賦課期日は当該年度の初日の属する年の1月1日です。",
    ),
]


def init_db(db: Session) -> None:
    """
    Initialize database with default data.

    Args:
        db: Database session
    """
    if db.query(QuestionModel).first() is not None:
        logger.info("Question pool already populated, skipping seed")
        return

    count = QuestionService(db).add_questions(SAMPLE_QUESTIONS)
    logger.info(f"Seeded {count} sample questions")
