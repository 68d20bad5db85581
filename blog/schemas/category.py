
from datetime import datetime
from pydantic import BaseModel, Field

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)

    class Config:
        str_strip_whitespace = True

class CategoryUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)

    class Config:
        str_strip_whitespace = True

class CategoryRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class CategoryOut(CategoryRef):
    posts_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
