"""FastAPI 应用，向渲染层暴露当前分数与段位。"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from stylemeter.service import MeterSession


def create_app(session: Optional[MeterSession] = None) -> FastAPI:
    """构建 FastAPI 应用并注册基础路由。

    未传入 session 时由应用自行创建，并随应用生命周期启动与释放。
    """

    owns_session = session is None
    _session = session or MeterSession()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if owns_session:
            await _session.start()
        try:
            yield
        finally:
            if owns_session:
                _session.dispose()

    app = FastAPI(title="stylemeter", lifespan=lifespan)
    app.state.session = _session

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/meter", tags=["meter"])
    async def meter() -> dict:
        return _session.snapshot().to_dict()

    @app.get("/ranks", tags=["meter"])
    async def ranks() -> list[dict]:
        table = _session.score_keeper.ranks
        return [
            {
                "index": index,
                "display_letter": rank.display_letter,
                "display_word": rank.display_word,
                "threshold_score": rank.threshold_score,
                "next_threshold": table.next_threshold(index),
                "color": rank.color.css(),
            }
            for index, rank in enumerate(table)
        ]

    return app
