"""StoreCreditCategory repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.store_credit_category import StoreCreditCategory


class StoreCreditCategoryRepository:
    """Repository for StoreCreditCategory model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[StoreCreditCategory]:
        """Get all categories sorted by name."""
        return self.db.query(StoreCreditCategory).order_by(StoreCreditCategory.name.asc()).all()

    def get_by_id(self, category_id: UUID) -> StoreCreditCategory | None:
        return (
            self.db.query(StoreCreditCategory)
            .filter(StoreCreditCategory.id == category_id)
            .first()
        )

    def get_by_name(self, name: str) -> StoreCreditCategory | None:
        return self.db.query(StoreCreditCategory).filter(StoreCreditCategory.name == name).first()

    def create(self, name: str) -> StoreCreditCategory:
        category = StoreCreditCategory(name=name)
        self.db.add(category)
        self.db.flush()
        self.db.refresh(category)
        return category

    def get_or_create(self, name: str) -> StoreCreditCategory:
        return self.get_by_name(name) or self.create(name)
