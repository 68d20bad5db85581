
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from blog.db.session import Base

class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    posts = relationship("Post", back_populates="category", cascade="all, delete-orphan", passive_deletes=True)
