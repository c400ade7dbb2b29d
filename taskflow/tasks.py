"""Task service: CRUD over the tasks table."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from taskflow.errors import NotFound, StoreError, ValidationError
from taskflow.models import Task as DBTask
from taskflow.models import TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 1000

SORT_FIELDS = {
    "id": DBTask.id,
    "title": DBTask.title,
    "description": DBTask.description,
    "status": DBTask.status,
    "ownerId": DBTask.owner_id,
    "owner_id": DBTask.owner_id,
    "createdAt": DBTask.created_at,
    "created_at": DBTask.created_at,
    "updatedAt": DBTask.updated_at,
    "updated_at": DBTask.updated_at,
}

UPDATABLE_FIELDS = ("title", "description", "status")


@dataclass
class Page:
    tasks: List[DBTask]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int


class TaskService:
    """Task operations against one request-scoped session.

    With ``scope_to_owner`` off, list/update/delete see every user's tasks;
    with it on they only see tasks owned by ``requester_id``.
    """

    def __init__(self, db: Session, scope_to_owner: bool = False):
        self.db = db
        self.scope_to_owner = scope_to_owner

    def _query(self, requester_id: Optional[int]) -> Query:
        query = self.db.query(DBTask)
        if self.scope_to_owner and requester_id is not None:
            query = query.filter(DBTask.owner_id == requester_id)
        return query

    def create(
        self,
        owner_id: int,
        title: str,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.TODO,
    ) -> DBTask:
        db_task = DBTask(
            title=title,
            description=description,
            status=status or TaskStatus.TODO,
            owner_id=owner_id,
        )
        try:
            self.db.add(db_task)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationError(f"Failed to create task: {e.orig}")
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to create task: {e}")
        self.db.refresh(db_task)
        logger.debug("Created task id=%s owner=%s", db_task.id, owner_id)
        return db_task

    def list(
        self,
        status: Optional[TaskStatus] = None,
        sort: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        requester_id: Optional[int] = None,
    ) -> Page:
        if page < 1:
            raise ValidationError("page must be at least 1")
        if page_size < 1:
            raise ValidationError("limit must be at least 1")
        page_size = min(page_size, MAX_PAGE_SIZE)

        if sort:
            column = SORT_FIELDS.get(sort)
            if column is None:
                raise ValidationError(f"Cannot sort by '{sort}'")
            order = (column.asc(), DBTask.id.asc())
        else:
            order = (DBTask.created_at.desc(), DBTask.id.desc())

        query = self._query(requester_id)
        if status:
            query = query.filter(DBTask.status == status)

        try:
            total_items = query.count()
            tasks = (
                query.order_by(*order)
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to retrieve tasks: {e}")

        return Page(
            tasks=tasks,
            total_items=total_items,
            total_pages=math.ceil(total_items / page_size),
            current_page=page,
            page_size=page_size,
        )

    def get(self, task_id: int, requester_id: Optional[int] = None) -> DBTask:
        try:
            task = self._query(requester_id).filter(DBTask.id == task_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to retrieve task: {e}")
        if task is None:
            raise NotFound()
        return task

    def update(self, task_id: int, patch: dict, requester_id: Optional[int] = None) -> DBTask:
        """Apply a partial update. Fields outside UPDATABLE_FIELDS are ignored."""
        task = self.get(task_id, requester_id)

        for field in UPDATABLE_FIELDS:
            if field in patch:
                setattr(task, field, patch[field])

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationError(f"Failed to update task: {e.orig}")
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to update task: {e}")
        self.db.refresh(task)
        return task

    def delete(self, task_id: int, requester_id: Optional[int] = None) -> None:
        try:
            deleted = (
                self._query(requester_id)
                .filter(DBTask.id == task_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to delete task: {e}")
        if not deleted:
            raise NotFound()
        logger.debug("Deleted task id=%s", task_id)
