"""
Question Service - Question bank CRUD and member proposals.
"""
import uuid
import logging

from sqlalchemy.exc import SQLAlchemyError

from oceancollect.domain import ValidationError
from oceancollect.models import QuestionPayload, parse_form
from oceancollect.models_db import Question, QuestionStatus
from oceancollect.application.results import ServiceResult, database_failure

logger = logging.getLogger(__name__)


class QuestionService:

    def __init__(self, uow):
        self._uow = uow

    def list_questions(self):
        return self._uow.questions.get_all()

    def list_for_creator(self, user_id):
        """Contributions of one user, newest first."""
        return self._uow.questions.get_by_creator(user_id)

    def create_question(self, data, created_by, force_status=None):
        try:
            payload = parse_form(QuestionPayload, data)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        question = Question(
            id=uuid.uuid4(),
            question_text=payload.question_text,
            question_type=payload.question_type,
            category=payload.category,
            options=payload.options,
            status=force_status or payload.status,
            created_by=created_by,
        )
        question_id = str(question.id)
        status = question.status.value

        try:
            self._uow.questions.add(question)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de l'ajout:")

        logger.info(f'Question created: {question_id} ({status})')
        return ServiceResult(
            success=True,
            message='La question a été ajoutée.',
            data={'id': question_id, 'status': status},
        )

    def propose_question(self, data, user_id):
        """Member proposal: always lands in the bank as a Proposition."""
        result = self.create_question(data, created_by=user_id, force_status=QuestionStatus.PROPOSAL)
        if result.success:
            result.message = 'Votre question a été soumise pour validation !'
        return result

    def update_question(self, question_id, data):
        question = self._uow.questions.get_by_id(question_id)
        if not question:
            return ServiceResult(success=False, message='Question introuvable.', error='NOT_FOUND')

        try:
            payload = parse_form(QuestionPayload, data)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        question.question_text = payload.question_text
        question.question_type = payload.question_type
        question.category = payload.category
        question.options = payload.options
        question.status = payload.status

        try:
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, 'Erreur:')

        logger.info(f'Question updated: {question_id}')
        return ServiceResult(success=True, message='La question a été mise à jour.')

    def delete_question(self, question_id):
        """Delete a question and the template items that point at it."""
        question = self._uow.questions.get_by_id(question_id)
        if not question:
            return ServiceResult(success=False, message='Question introuvable.', error='NOT_FOUND')

        try:
            removed = self._uow.templates.delete_items_for_question(question.id)
            self._uow.questions.delete(question)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, 'Erreur lors de la suppression de la question:')

        logger.info(f'Question deleted: {question_id} ({removed} template items removed)')
        return ServiceResult(success=True, message='Question supprimée avec succès.')
