"""Repository for QuestionTemplate and QuestionTemplateItem entities."""
from typing import Optional, List
import uuid

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from oceancollect.models_db import QuestionTemplate, QuestionTemplateItem


class TemplateRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: uuid.UUID) -> Optional[QuestionTemplate]:
        return self._session.get(QuestionTemplate, id)

    def get_all(self) -> List[QuestionTemplate]:
        return self._session.query(QuestionTemplate).order_by(QuestionTemplate.created_at.desc()).all()

    def count(self) -> int:
        return self._session.query(QuestionTemplate).count()

    def get_item_by_id(self, item_id: int) -> Optional[QuestionTemplateItem]:
        return self._session.get(QuestionTemplateItem, item_id)

    def get_items(self, template_id: uuid.UUID) -> List[QuestionTemplateItem]:
        """Items with their question, in questionnaire order."""
        return self._session.query(QuestionTemplateItem).options(
            joinedload(QuestionTemplateItem.question),
        ).filter(
            QuestionTemplateItem.template_id == template_id,
        ).order_by(QuestionTemplateItem.item_order.asc(), QuestionTemplateItem.id.asc()).all()

    def get_question_ids(self, template_id: uuid.UUID) -> List[uuid.UUID]:
        rows = self._session.query(QuestionTemplateItem.question_id).filter(
            QuestionTemplateItem.template_id == template_id,
        ).all()
        return [row[0] for row in rows]

    def next_item_order(self, template_id: uuid.UUID) -> int:
        current = self._session.query(func.max(QuestionTemplateItem.item_order)).filter(
            QuestionTemplateItem.template_id == template_id,
        ).scalar()
        return 0 if current is None else current + 1

    def delete_items_for_template(self, template_id: uuid.UUID) -> int:
        """Delete all items for a template. Returns count deleted."""
        return self._session.query(QuestionTemplateItem).filter(
            QuestionTemplateItem.template_id == template_id,
        ).delete(synchronize_session=False)

    def delete_items_for_question(self, question_id: uuid.UUID) -> int:
        return self._session.query(QuestionTemplateItem).filter(
            QuestionTemplateItem.question_id == question_id,
        ).delete(synchronize_session=False)

    def detach_user(self, user_id: uuid.UUID) -> None:
        self._session.query(QuestionTemplate).filter(
            QuestionTemplate.created_by == user_id,
        ).update({QuestionTemplate.created_by: None}, synchronize_session=False)

    def add(self, template: QuestionTemplate) -> QuestionTemplate:
        self._session.add(template)
        return template

    def add_item(self, item: QuestionTemplateItem) -> QuestionTemplateItem:
        self._session.add(item)
        return item

    def delete_item(self, item: QuestionTemplateItem) -> None:
        self._session.delete(item)

    def delete(self, template: QuestionTemplate) -> None:
        self._session.delete(template)
