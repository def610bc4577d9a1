# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.projects import router as projects_router
from app.api.routes import router as api_router
from app.config import settings

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """ルートロガーにコンソール出力を1つだけ付ける。"""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
                "%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
    root.setLevel(level.upper())


setup_logging(settings.log_level)

app = FastAPI(title="Blog Pipeline")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # 入力不備は 422 ではなく 400 で返す
    logger.warning("[api] invalid request path=%s errors=%s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "error": str(exc)},
    )


app.include_router(api_router, prefix="/api")
app.include_router(projects_router, prefix="/api")


def run() -> None:
    """uvicorn で API サーバを起動する（`blog-pipeline` / `python -m app.main`）。"""
    import uvicorn

    logger.info("[api] starting server host=%s port=%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
