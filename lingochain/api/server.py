"""代理服务。

只有一个业务端点 POST /api/chat：把用户消息转发给上游 Messages API，
成功时原样返回上游 JSON，任何异常都返回 500 和固定的错误体。
"""

from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from lingochain import __version__
from lingochain.config.settings import Settings, settings as default_settings
from lingochain.domain.models import ChatRequest
from lingochain.infrastructure.logging.logger import logger
from lingochain.providers import create_provider
from lingochain.providers.base import ProviderClient


PROXY_ERROR_MESSAGE = "Failed to get AI response"


class ChatBody(BaseModel):
    message: str = Field(..., description="User's message")


def get_provider(request: Request) -> ProviderClient:
    return create_provider(cfg=request.app.state.settings)


def _error_response() -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": PROXY_ERROR_MESSAGE})


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    cfg = cfg or default_settings
    app = FastAPI(title="Lingochain Chat Proxy", version=__version__)
    app.state.settings = cfg
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.error(
            f"Error: invalid request body: {exc.errors()}",
            extra={"extra": {"path": request.url.path}},
        )
        return _error_response()

    @app.post("/api/chat")
    def chat(body: ChatBody, provider: ProviderClient = Depends(get_provider)):
        try:
            logger.info(
                f"Relaying message: {len(body.message)} chars",
                extra={"extra": {"provider": provider.name}},
            )
            data: Dict[str, Any] = provider.chat(ChatRequest(message=body.message, model=cfg.default_model))
            return data
        except Exception as e:
            logger.exception(
                f"Error: {e}",
                extra={"extra": {"provider": getattr(provider, "name", None), "error": str(e)}},
            )
            return _error_response()

    @app.get("/health")
    def health():
        return {"status": "ok"}

    if cfg.static_dir:
        app.mount("/", StaticFiles(directory=cfg.static_dir, html=True), name="static")

    return app


app = create_app()
