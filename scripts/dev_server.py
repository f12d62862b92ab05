"""开发环境启动 FastAPI 服务，并用模拟打字驱动计分。"""

from __future__ import annotations

import asyncio
import logging
import signal
import threading
from contextlib import suppress
from typing import Optional

import uvicorn

from stylemeter.adapters import SimulatedActivitySource
from stylemeter.config_store import load_meter_config
from stylemeter.service import MeterSession
from stylemeter.ui import create_app

logger = logging.getLogger(__name__)


async def main(session: Optional[MeterSession] = None, simulate: bool = True) -> None:
    if session is None:
        session = MeterSession(load_meter_config())

    await session.start()
    app = create_app(session)

    source: Optional[SimulatedActivitySource] = None
    if simulate:
        source = SimulatedActivitySource(session.score_keeper)
        await source.start()

    uvicorn_config = uvicorn.Config(app, host="127.0.0.1", port=8000, reload=False)
    server = uvicorn.Server(uvicorn_config)

    try:
        if threading.current_thread() is threading.main_thread():
            stop_event = asyncio.Event()

            def _handle_stop(*_: object) -> None:
                logger.info("收到终止信号，准备关闭服务器…")
                stop_event.set()

            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, _handle_stop)

            async def _serve() -> None:
                await server.serve()
                stop_event.set()

            serve_task = asyncio.create_task(_serve())

            await stop_event.wait()
            serve_task.cancel()
            with suppress(asyncio.CancelledError):
                await serve_task
        else:
            await server.serve()
    finally:
        if source is not None:
            source.stop()
        session.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")
    asyncio.run(main())
