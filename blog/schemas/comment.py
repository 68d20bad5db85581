
from datetime import datetime
from pydantic import BaseModel, Field

class CommentCreate(BaseModel):
    body: str = Field(min_length=1, max_length=5000)
    post_id: int

    class Config:
        str_strip_whitespace = True

class CommentUpdate(BaseModel):
    body: str = Field(min_length=1, max_length=5000)

    class Config:
        str_strip_whitespace = True

class AuthorRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class CommentOut(BaseModel):
    id: int
    body: str
    post_id: int
    user_id: int
    author: AuthorRef
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
