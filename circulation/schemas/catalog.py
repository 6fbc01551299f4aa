from pydantic import BaseModel
from typing import Optional

class Book(BaseModel):
    id: int
    title: str
    author: str
    isbn: Optional[str] = None
    publication_year: Optional[int] = None

    class Config:
        from_attributes = True

class Member(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True
