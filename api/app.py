"""
api/app.py — FastAPI 앱 인스턴스 + 세션 미들웨어
"""

import logging
import threading
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from api.config import CLEANUP_INTERVAL, SESSION_COOKIE, SESSION_TTL
from api.routes import router
import api.session as session

logger = logging.getLogger(__name__)


def create_app(clock: Callable[[], float] = time.monotonic) -> FastAPI:
    """
    Args:
        clock: 시험 타이머가 사용할 단조 시계. 테스트에서 가짜 시계를 주입한다.
    """
    app = FastAPI(title="Licensing Exam", docs_url=None, redoc_url=None)
    app.state.clock = clock

    # CORS (모바일 브라우저 등 다양한 출처 허용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 세션 미들웨어: 쿠키에서 세션 ID를 읽고, 없으면 새로 발급
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=SESSION_TTL,
        )
        return response

    app.include_router(router)

    @app.get("/api/health")
    async def health():
        return {"ok": True}

    # 만료 세션 주기적 정리
    def _cleanup_loop():
        while True:
            time.sleep(CLEANUP_INTERVAL)
            removed = session.cleanup_expired()
            if removed:
                logger.info(f"만료 세션 {removed}개 정리")

    t = threading.Thread(target=_cleanup_loop, daemon=True)
    t.start()

    return app
