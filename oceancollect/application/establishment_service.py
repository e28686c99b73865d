"""Service for establishment CRUD."""
import uuid
import logging

from sqlalchemy.exc import SQLAlchemyError

from oceancollect.domain import Email, ValidationError
from oceancollect.models import EstablishmentPayload, parse_form
from oceancollect.models_db import Establishment
from oceancollect.application.results import ServiceResult, database_failure

logger = logging.getLogger(__name__)


class EstablishmentService:

    def __init__(self, uow):
        self._uow = uow

    def list_establishments(self):
        return self._uow.establishments.get_all()

    def _validated(self, data):
        payload = parse_form(EstablishmentPayload, data)
        if payload.contact_email:
            payload.contact_email = Email(payload.contact_email).value
        return payload

    def create_establishment(self, data, created_by):
        try:
            payload = self._validated(data)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        est = Establishment(id=uuid.uuid4(), created_by=created_by, **payload.model_dump())
        est_id = str(est.id)
        est_name = est.name

        try:
            self._uow.establishments.add(est)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de l'ajout:")

        logger.info(f'Establishment created: {est_id}')
        return ServiceResult(
            success=True,
            message="L'établissement a été ajouté.",
            data={'id': est_id, 'name': est_name},
        )

    def update_establishment(self, establishment_id, data):
        est = self._uow.establishments.get_by_id(establishment_id)
        if not est:
            return ServiceResult(success=False, message='Établissement introuvable.', error='NOT_FOUND')

        try:
            payload = self._validated(data)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        for field, value in payload.model_dump().items():
            setattr(est, field, value)

        try:
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, 'Erreur:')

        logger.info(f'Establishment updated: {establishment_id}')
        return ServiceResult(success=True, message="L'établissement a été mis à jour.")

    def delete_establishment(self, establishment_id):
        est = self._uow.establishments.get_by_id(establishment_id)
        if not est:
            return ServiceResult(success=False, message='Établissement introuvable.', error='NOT_FOUND')

        try:
            self._uow.establishments.delete(est)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de la suppression de l'établissement:")

        logger.info(f'Establishment deleted: {establishment_id}')
        return ServiceResult(success=True, message='Établissement supprimé avec succès.')
