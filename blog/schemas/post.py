
from datetime import datetime
from pydantic import BaseModel, Field
from blog.schemas.category import CategoryRef
from blog.schemas.comment import AuthorRef, CommentOut

class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    category_id: int
    image: str | None = Field(default=None, max_length=2048)

    class Config:
        str_strip_whitespace = True

class PostUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    category_id: int | None = None
    image: str | None = Field(default=None, max_length=2048)

    class Config:
        str_strip_whitespace = True

class PostOut(BaseModel):
    id: int
    title: str
    content: str
    image: str | None = None
    category_id: int
    user_id: int
    author: AuthorRef
    category: CategoryRef
    comments: list[CommentOut] = []
    comments_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
