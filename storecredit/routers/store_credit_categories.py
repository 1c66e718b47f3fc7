"""Store credit category API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storecredit.core.auth import get_current_admin
from storecredit.core.database import get_db
from storecredit.models.store_credit_category import StoreCreditCategory
from storecredit.models.user import User
from storecredit.repositories.store_credit_category_repository import (
    StoreCreditCategoryRepository,
)
from storecredit.schemas.store_credit import StoreCreditCategoryResponse

router = APIRouter()


@router.get(
    "/",
    response_model=list[StoreCreditCategoryResponse],
    summary="List store credit categories",
)
async def list_categories(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> list[StoreCreditCategory]:
    """List categories sorted by name."""
    return StoreCreditCategoryRepository(db).get_all()
