from pydantic import BaseModel
from typing import Optional

class ChatRequest(BaseModel):
    # Optional here so a missing message maps to the relay's own 400 body
    message: Optional[str] = None
    context: Optional[str] = None

class ChatResponse(BaseModel):
    message: str
