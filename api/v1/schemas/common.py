from __future__ import annotations

from pydantic import BaseModel


class Ack(BaseModel):
    """Acknowledgement body for writes."""

    id: int | None = None
    message: str
