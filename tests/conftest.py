import pytest

from licensing_exam.engine.session import ExamSession
from licensing_exam.engine.timer import CountdownTimer
from licensing_exam.models.question_model import Option, Question, QuestionSet
from licensing_exam.models.session_state import ExamConfig
from licensing_exam.services.exam_service import score_exam

CATEGORIES = ["Regulations", "Pedagogy", "Assessment"]


def make_question(qid: int, category: str = "Regulations", correct: str = "a") -> Question:
    return Question(
        id=qid,
        prompt=f"Question {qid}?",
        options=[Option(id=oid, text=f"Option {oid}") for oid in "abcd"],
        correct_option_id=correct,
        category=category,
        explanation=f"Explanation {qid}",
    )


class FakeClock:
    """수동으로 진행시키는 단조 시계."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingScorer:
    """score_exam 을 감싸 호출 횟수를 센다."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, questions, answers, pass_threshold):
        self.calls += 1
        return score_exam(questions, answers, pass_threshold)


@pytest.fixture
def ten_questions() -> QuestionSet:
    """10문항, 카테고리 3종 순환, 정답은 모두 'a'."""
    return QuestionSet(questions=[
        make_question(i, CATEGORIES[(i - 1) % len(CATEGORIES)]) for i in range(1, 11)
    ])


@pytest.fixture
def timer() -> CountdownTimer:
    return CountdownTimer()


@pytest.fixture
def scorer() -> CountingScorer:
    return CountingScorer()


@pytest.fixture
def exam_config() -> ExamConfig:
    return ExamConfig(duration_seconds=5, pass_threshold=70, max_attempts=3, cooldown_days=7)


@pytest.fixture
def exam(ten_questions, timer, scorer, exam_config) -> ExamSession:
    """시작된 시험 세션 (5초 제한)."""
    session = ExamSession(ten_questions, timer=timer, scorer=scorer)
    session.start(exam_config)
    return session


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
