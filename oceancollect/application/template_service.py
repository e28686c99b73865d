"""
Template Service - Questionnaire templates and their ordered items.

Handles:
- Template CRUD (title, description)
- Template detail (items ordered by item_order)
- Adding questions from the bank and removing single items
"""
import uuid
import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from oceancollect.domain import ValidationError, TemplateNotFoundError
from oceancollect.models import TemplatePayload, parse_form
from oceancollect.models_db import QuestionTemplate, QuestionTemplateItem
from oceancollect.application.results import ServiceResult, database_failure

logger = logging.getLogger(__name__)


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class TemplateService:

    def __init__(self, uow):
        self._uow = uow

    def list_templates(self):
        return self._uow.templates.get_all()

    def create_template(self, data, created_by):
        try:
            payload = parse_form(TemplatePayload, data)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        template = QuestionTemplate(
            id=uuid.uuid4(),
            title=payload.title,
            description=payload.description,
            version=1,
            created_by=created_by,
        )
        template_id = str(template.id)

        try:
            self._uow.templates.add(template)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de l'ajout:")

        logger.info(f'Template created: {template_id}')
        return ServiceResult(
            success=True,
            message='Le modèle a été ajouté.',
            data={'id': template_id, 'title': payload.title},
        )

    def update_template(self, template_id, data):
        """Title and description only; version is left untouched."""
        template = self._uow.templates.get_by_id(template_id)
        if not template:
            return ServiceResult(success=False, message='Modèle introuvable.', error='NOT_FOUND')

        try:
            payload = parse_form(TemplatePayload, data)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        template.title = payload.title
        template.description = payload.description

        try:
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, 'Erreur:')

        logger.info(f'Template updated: {template_id}')
        return ServiceResult(success=True, message='Le modèle a été mis à jour.')

    def delete_template(self, template_id):
        """Delete the template after deleting its items."""
        template = self._uow.templates.get_by_id(template_id)
        if not template:
            return ServiceResult(success=False, message='Modèle introuvable.', error='NOT_FOUND')

        try:
            removed = self._uow.templates.delete_items_for_template(template.id)
            # Bulk delete bypassed the session: drop the stale collection
            self._uow.session.expire(template, ['items'])
            self._uow.templates.delete(template)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, 'Erreur lors de la suppression du modèle:')

        logger.info(f'Template deleted: {template_id} ({removed} items)')
        return ServiceResult(success=True, message='Modèle supprimé avec succès.')

    def get_detail(self, template_id):
        """
        Returns (template, items) with items in questionnaire order.

        Raises:
            TemplateNotFoundError: unknown template id
        """
        template = self._uow.templates.get_by_id(template_id)
        if not template:
            raise TemplateNotFoundError(str(template_id))
        return template, self._uow.templates.get_items(template.id)

    def available_questions(self, template_id, term: str = None):
        """Bank questions not yet part of the template."""
        existing = self._uow.templates.get_question_ids(template_id)
        term = (term or '').strip() or None
        return self._uow.questions.search_excluding(existing, term)

    def add_questions(self, template_id, question_ids: Iterable):
        """
        Append the selected questions after the current last item.
        Ids already in the template (or unknown) are skipped.
        """
        template = self._uow.templates.get_by_id(template_id)
        if not template:
            return ServiceResult(success=False, message='Modèle introuvable.', error='NOT_FOUND')

        wanted = []
        for raw in question_ids:
            qid = _as_uuid(raw)
            if qid and qid not in wanted:
                wanted.append(qid)
        if not wanted:
            return ServiceResult(success=False, message='Aucune question sélectionnée.', error='EMPTY_SELECTION')

        existing = set(self._uow.templates.get_question_ids(template.id))
        known = {q.id for q in self._uow.questions.get_by_ids(wanted)}
        to_add = [qid for qid in wanted if qid in known and qid not in existing]

        order = self._uow.templates.next_item_order(template.id)
        try:
            for qid in to_add:
                self._uow.templates.add_item(QuestionTemplateItem(
                    template_id=template.id,
                    question_id=qid,
                    item_order=order,
                ))
                order += 1
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de l'ajout des questions:")

        logger.info(f'Template {template_id}: {len(to_add)} questions added')
        return ServiceResult(
            success=True,
            message=f'{len(to_add)} question(s) ajoutée(s) au modèle.',
            data={'added': len(to_add)},
        )

    def remove_item(self, template_id, item_id):
        item = self._uow.templates.get_item_by_id(item_id)
        if not item or str(item.template_id) != str(template_id):
            return ServiceResult(success=False, message='Élément introuvable.', error='NOT_FOUND')

        try:
            self._uow.templates.delete_item(item)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, 'Erreur:')

        logger.info(f'Template {template_id}: item {item_id} removed')
        return ServiceResult(success=True, message='Question retirée du modèle.')
