# Run from project root: uvicorn newsbot.main:app --reload  (or: python -m newsbot.main)

import logging

import uvicorn
from fastapi import FastAPI

from newsbot.api.routes import router
from newsbot.core.config import PORT

logging.basicConfig(level=logging.INFO)


app = FastAPI(title="News Intent Orchestrator")
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
