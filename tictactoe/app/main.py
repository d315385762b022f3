import uvicorn
from fastapi import FastAPI

from ..config import get_settings
from .ai import router as ai_router
from .offline import router as offline_router


app = FastAPI(title="tictactoe")
app.include_router(offline_router)
app.include_router(ai_router)


def serve():
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
