"""
engine/navigator.py

문제 인덱스 커서. 이전/다음 이동은 양 끝에서 멈추고(순환 없음),
직접 이동은 범위를 벗어나면 거부한다. 문제 잠금이나 순방향 전용 진행은 없다.
"""

from licensing_exam.errors import InvalidNavigation


class Navigator:

    def __init__(self, question_count: int) -> None:
        if question_count < 1:
            raise ValueError(f"문제 수는 1 이상이어야 합니다: {question_count}")
        self._count = question_count
        self._index = 0

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def question_count(self) -> int:
        return self._count

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == self._count - 1

    def next(self) -> int:
        if not self.is_last:
            self._index += 1
        return self._index

    def previous(self) -> int:
        if not self.is_first:
            self._index -= 1
        return self._index

    def go_to(self, index: int) -> int:
        """
        지정 인덱스로 바로 이동.

        Raises:
            InvalidNavigation: index 가 정수가 아니거나 [0, question_count) 범위 밖인 경우.
                               커서는 변경되지 않는다.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidNavigation(f"문제 인덱스는 정수여야 합니다: {index!r}")
        if not (0 <= index < self._count):
            raise InvalidNavigation(
                f"문제 인덱스 {index}가 범위를 벗어났습니다 (0 ~ {self._count - 1})."
            )
        self._index = index
        return self._index
