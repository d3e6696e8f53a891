# frontdesk/schemas/common.py
from pydantic import BaseModel
from typing import Optional

class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: str
    reason: Optional[str] = None
    field: Optional[str] = None

class OkResponse(BaseModel):
    ok: bool = True
