from prometheus_fastapi_instrumentator import Instrumentator

from hackops.core.config import settings
from hackops.core.logging import configure_logging
from . import app as base_app

configure_logging(settings.LOG_LEVEL, service=settings.APP_NAME)
app = base_app
Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("hackops.main:app", host=settings.HOST, port=settings.PORT)
