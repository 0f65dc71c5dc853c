import os

# 서버 설정
DEFAULT_TIMEOUT = 15.0  # 서버 기동 대기 시간 (초)

# 세션 설정
SESSION_COOKIE = "exam_session"
SESSION_TTL = int(os.getenv("SESSION_TTL", "10800"))  # 3시간 (시험 120분 + 여유)
CLEANUP_INTERVAL = 300  # 만료 세션 정리 주기 (초)
