# api/v1/deps.py
from fastapi import Request

from services.gemini import LLMClient
from services.storage import Storage


def get_storage(request: Request) -> Storage:
    """The process-wide storage created in `main.lifespan`."""
    return request.app.state.storage


def get_llm(request: Request) -> LLMClient:
    return request.app.state.llm
