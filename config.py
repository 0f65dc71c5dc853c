import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
LOG_FILE = os.getenv("EXAM_LOG_FILE", os.path.join(BASE_DIR, "launch.log"))

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))

# 시험 기본 설정 (자격 시험: 120분, 70점 이상 합격, 3회 응시, 불합격 후 7일 대기)
EXAM_DURATION_SECONDS = int(os.getenv("EXAM_DURATION_SECONDS", str(120 * 60)))
PASS_THRESHOLD = int(os.getenv("PASS_THRESHOLD", "70"))
MAX_ATTEMPTS = int(os.getenv("MAX_ATTEMPTS", "3"))
COOLDOWN_DAYS = int(os.getenv("COOLDOWN_DAYS", "7"))

# 타이머 표시 설정
TIME_WARNING_SECONDS = 600  # 10분 미만이면 경고
