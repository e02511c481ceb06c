from pydantic import BaseModel
from typing import Optional

# ------------------ Subject Schemas ------------------

class SubjectCreate(BaseModel):
    name: str
    name_ar: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

class SubjectOut(BaseModel):
    id: int
    name: str
    name_ar: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    class Config:
        from_attributes = True

class SubjectListResponse(BaseModel):
    subjects: list[SubjectOut]
