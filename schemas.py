# schemas.py
from pydantic import BaseModel
from typing import Optional


# Client -> server (create request)
class TodoCreate(BaseModel):
    text: str


# Client -> server (partial update). Fields not listed here are dropped.
class TodoUpdate(BaseModel):
    text: Optional[str] = None
    completed: Optional[bool] = None


# Server -> client. Defaults cover records someone edited by hand.
class TodoResponse(BaseModel):
    id: int
    text: str = ""
    completed: bool = False
    createdAt: Optional[str] = None


class DeleteResponse(BaseModel):
    success: bool


class ErrorResponse(BaseModel):
    error: str
