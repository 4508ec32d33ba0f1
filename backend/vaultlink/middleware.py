"""API 观测性中间件与日志配置"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("vaultlink.api")


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    请求观测中间件，每个请求记录一行日志：
    - request_id: 唯一请求标识
    - method: HTTP 方法
    - path: 请求路径
    - status_code: 响应状态码
    - latency_ms: 请求耗时（毫秒）
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()
        # 注入 request.state，方便后续使用
        request.state.request_id = request_id

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} "
                f"-> {status_code} ({latency_ms:.2f}ms) ERROR: {e}"
            )
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000
        line = (
            f"[{request_id}] {request.method} {request.url.path} "
            f"-> {status_code} ({latency_ms:.2f}ms)"
        )
        # 根据状态码选择日志级别
        if status_code >= 500:
            logger.error(line)
        elif status_code >= 400:
            logger.warning(line)
        else:
            logger.info(line)

        # 添加到响应头，方便客户端追踪
        response.headers["X-Request-ID"] = request_id
        return response


def setup_logging(log_level: str = "INFO") -> None:
    """配置日志格式"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx 在 INFO 级别记录每次请求，与中间件日志重复
    logging.getLogger("httpx").setLevel(logging.WARNING)
