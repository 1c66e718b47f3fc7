"""Repository for Notification CRUD operations."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.notification import Notification


class NotificationRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        category: str,
        title: str,
        message: str,
        resource_type: str | None = None,
        resource_id: UUID | None = None,
    ) -> Notification:
        notification = Notification(
            category=category,
            title=title,
            message=message,
            resource_type=resource_type,
            resource_id=resource_id,
        )
        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def get_all(self, category: str | None = None, skip: int = 0, limit: int = 100) -> list[Notification]:
        query = self.db.query(Notification)
        if category:
            query = query.filter(Notification.category == category)
        return query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()
