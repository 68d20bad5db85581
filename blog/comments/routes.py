
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from blog.auth.deps import get_db, get_current_user
from blog.comments import service
from blog.models.user import User
from blog.schemas.auth import MessageOut
from blog.schemas.comment import CommentCreate, CommentUpdate, CommentOut

router = APIRouter(prefix="/api/comments", tags=["comments"])

@router.get("", response_model=list[CommentOut])
def list_comments(post_id: int | None = None, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.list_comments(db, post_id=post_id)

@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(body: CommentCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.create_comment(db, body, author_id=user.id)

@router.get("/{comment_id}", response_model=CommentOut)
def get_comment(comment_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.get_comment(db, comment_id)

@router.api_route("/{comment_id}", methods=["PUT", "PATCH"], response_model=CommentOut)
def update_comment(comment_id: int, body: CommentUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.update_comment(db, comment_id, body, caller_id=user.id)

@router.delete("/{comment_id}", response_model=MessageOut)
def delete_comment(comment_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    service.delete_comment(db, comment_id, caller_id=user.id)
    return MessageOut(message="Comment deleted successfully.")
