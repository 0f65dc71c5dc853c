"""
errors.py

시험 엔진 예외 계층.
설정 오류는 시험 시작을 막는 치명적 오류이고, 나머지는 세션을 유지한 채 복구 가능하다.
"""


class ExamError(Exception):
    """시험 엔진이 발생시키는 모든 예외의 기반 클래스."""


class ConfigurationError(ExamError):
    """빈 문제 세트, 0 이하의 시험 시간, 범위를 벗어난 합격 기준 등."""


class InvalidSelection(ExamError):
    """존재하지 않는 문제 ID 또는 해당 문제에 없는 보기 ID. 기존 답안은 유지된다."""


class InvalidNavigation(ExamError):
    """범위를 벗어난 문제 인덱스로 이동 요청. 커서는 변하지 않는다."""


class InvalidTransition(ExamError):
    """현재 세션 단계에서 허용되지 않는 동작 (예: 시작 전 답안 저장, 제출 후 수정)."""
