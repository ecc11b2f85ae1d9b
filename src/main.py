import uvicorn

from vocabquiz.app import create_app
from vocabquiz.config import settings

app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
