
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from blog.auth.deps import get_db, get_current_user
from blog.models.user import User
from blog.posts import service
from blog.schemas.auth import MessageOut
from blog.schemas.post import PostCreate, PostUpdate, PostOut

router = APIRouter(prefix="/api/posts", tags=["posts"])

@router.get("", response_model=list[PostOut])
def list_posts(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.list_posts(db)

@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(body: PostCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.create_post(db, body, author_id=user.id)

@router.get("/{post_id}", response_model=PostOut)
def get_post(post_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.get_post(db, post_id)

@router.api_route("/{post_id}", methods=["PUT", "PATCH"], response_model=PostOut)
def update_post(post_id: int, body: PostUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.update_post(db, post_id, body, caller_id=user.id)

@router.delete("/{post_id}", response_model=MessageOut)
def delete_post(post_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    service.delete_post(db, post_id, caller_id=user.id)
    return MessageOut(message="Post deleted successfully.")
