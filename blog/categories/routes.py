
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from blog.auth.deps import get_db, get_current_user
from blog.categories import service
from blog.models.user import User
from blog.schemas.auth import MessageOut
from blog.schemas.category import CategoryCreate, CategoryUpdate, CategoryOut

router = APIRouter(prefix="/api/categories", tags=["categories"])

@router.get("", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.list_categories(db)

@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(body: CategoryCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.create_category(db, body)

@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.get_category(db, category_id)

@router.api_route("/{category_id}", methods=["PUT", "PATCH"], response_model=CategoryOut)
def update_category(category_id: int, body: CategoryUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.update_category(db, category_id, body)

@router.delete("/{category_id}", response_model=MessageOut)
def delete_category(category_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    service.delete_category(db, category_id)
    return MessageOut(message="Category deleted successfully.")
