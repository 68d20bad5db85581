
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from blog.errors import NotFoundError, ValidationError
from blog.models.category import Category
from blog.models.post import Post
from blog.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate

logger = logging.getLogger(__name__)

NAME_TAKEN = "The name has already been taken."


def _with_counts(db: Session):
    return (
        db.query(Category, func.count(Post.id))
        .outerjoin(Post, Post.category_id == Category.id)
        .group_by(Category.id)
    )


def _out(category: Category, posts_count: int) -> CategoryOut:
    out = CategoryOut.model_validate(category)
    out.posts_count = posts_count
    return out


def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    query = db.query(Category.id).filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first() is not None:
        raise ValidationError.for_field("name", NAME_TAKEN)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError.for_field("name", NAME_TAKEN)


def list_categories(db: Session) -> list[CategoryOut]:
    rows = _with_counts(db).order_by(Category.name).all()
    return [_out(category, count) for category, count in rows]


def get_category(db: Session, category_id: int) -> CategoryOut:
    row = _with_counts(db).filter(Category.id == category_id).first()
    if row is None:
        raise NotFoundError("Category not found.")
    return _out(*row)


def create_category(db: Session, data: CategoryCreate) -> CategoryOut:
    name = data.name.strip()
    if not name:
        raise ValidationError.for_field("name", "The name field is required.")
    _ensure_unique_name(db, name)
    category = Category(name=name)
    db.add(category)
    _commit(db)
    logger.info("created category id=%s", category.id)
    return get_category(db, category.id)


def update_category(db: Session, category_id: int, data: CategoryUpdate) -> CategoryOut:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found.")
    name = data.name.strip()
    if not name:
        raise ValidationError.for_field("name", "The name field is required.")
    _ensure_unique_name(db, name, exclude_id=category_id)
    category.name = name
    _commit(db)
    return get_category(db, category_id)


def delete_category(db: Session, category_id: int) -> None:
    """Delete a category; the store cascades to its posts and their comments."""
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found.")
    db.delete(category)
    db.commit()
    logger.info("deleted category id=%s", category_id)
