"""Repository for Question entities."""
from typing import Optional, List, Iterable
import uuid

from sqlalchemy import func, or_

from oceancollect.models_db import Question, QuestionStatus


class QuestionRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: uuid.UUID) -> Optional[Question]:
        return self._session.get(Question, id)

    def get_all(self) -> List[Question]:
        return self._session.query(Question).order_by(Question.created_at.desc()).all()

    def get_by_creator(self, user_id: uuid.UUID) -> List[Question]:
        return self._session.query(Question).filter(
            Question.created_by == user_id,
        ).order_by(Question.created_at.desc()).all()

    def get_by_ids(self, ids: Iterable[uuid.UUID]) -> List[Question]:
        ids = list(ids)
        if not ids:
            return []
        return self._session.query(Question).filter(Question.id.in_(ids)).all()

    def search_excluding(self, exclude_ids: Iterable[uuid.UUID] = (), term: str = None) -> List[Question]:
        """Questions not in exclude_ids, optionally matching term on text or category."""
        query = self._session.query(Question)
        exclude_ids = list(exclude_ids)
        if exclude_ids:
            query = query.filter(~Question.id.in_(exclude_ids))
        if term:
            pattern = f"%{term.lower()}%"
            query = query.filter(or_(
                func.lower(Question.question_text).like(pattern),
                func.lower(Question.category).like(pattern),
            ))
        return query.order_by(Question.created_at.desc()).all()

    def count_by_status(self, status: QuestionStatus) -> int:
        return self._session.query(Question).filter(Question.status == status).count()

    def detach_user(self, user_id: uuid.UUID) -> None:
        self._session.query(Question).filter(
            Question.created_by == user_id,
        ).update({Question.created_by: None}, synchronize_session=False)

    def add(self, question: Question) -> Question:
        self._session.add(question)
        return question

    def delete(self, question: Question) -> None:
        self._session.delete(question)
