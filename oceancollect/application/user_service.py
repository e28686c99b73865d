"""Service for user administration (sign-up, profile edits, remove-user procedure)."""
import uuid
import logging

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash

from oceancollect.domain import Email, ValidationError
from oceancollect.models import SignUpPayload, ProfileUpdatePayload, parse_form
from oceancollect.models_db import User, Profile
from oceancollect.application.results import ServiceResult, database_failure

logger = logging.getLogger(__name__)


class UserService:
    """Handles account + profile CRUD for the admin users page."""

    def __init__(self, uow):
        self._uow = uow

    def list_users(self):
        return self._uow.users.get_all_profiles()

    def create_user(self, data):
        """
        Create an authentication account and its profile in one transaction.

        Returns:
            ServiceResult with the new profile data on success.
        """
        try:
            payload = parse_form(SignUpPayload, data)
            email = Email(payload.email)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        if self._uow.users.get_by_email(email.value):
            return ServiceResult(success=False, message='Un utilisateur avec cette adresse e-mail existe déjà.',
                                 error='DUPLICATE_EMAIL')

        user = User(
            id=uuid.uuid4(),
            email=email.value,
            password_hash=generate_password_hash(payload.password),
            is_active=True,
        )
        user.profile = Profile(
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
        )

        # Capture data before commit (SQLAlchemy expires attributes after commit)
        data_out = {
            'id': str(user.id),
            'email': user.email,
            'first_name': payload.first_name,
            'last_name': payload.last_name,
            'role': payload.role.value,
        }

        try:
            self._uow.users.add(user)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de la création de l'utilisateur:")

        logger.info(f"User created: {data_out['id']} ({data_out['role']})")
        return ServiceResult(success=True, message='Utilisateur créé avec succès.', data=data_out)

    def update_user(self, user_id, data):
        """Update name fields and role. The email is not editable."""
        profile = self._uow.users.get_profile(user_id)
        if not profile:
            return ServiceResult(success=False, message='Utilisateur introuvable.', error='NOT_FOUND')

        try:
            payload = parse_form(ProfileUpdatePayload, data)
        except ValidationError as e:
            return ServiceResult(success=False, message=e.message, error=e.code)

        profile.first_name = payload.first_name
        profile.last_name = payload.last_name
        profile.role = payload.role

        try:
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de la mise à jour de l'utilisateur:")

        logger.info(f'User updated: {user_id}')
        return ServiceResult(success=True, message='Utilisateur mis à jour avec succès !')

    def delete_user(self, user_id, acting_user_id=None):
        """
        Privileged remove-user procedure.

        Removes the profile and the authentication account. Content authored by
        the user (establishments, questions, templates) is kept with its creator
        reference cleared.
        """
        if acting_user_id is not None and str(acting_user_id) == str(user_id):
            return ServiceResult(success=False, message='Vous ne pouvez pas supprimer votre propre compte.',
                                 error='SELF_DELETE')

        user = self._uow.users.get_by_id(user_id)
        if not user:
            return ServiceResult(success=False, message='Utilisateur introuvable.', error='NOT_FOUND')

        try:
            self._uow.establishments.detach_user(user.id)
            self._uow.questions.detach_user(user.id)
            self._uow.templates.detach_user(user.id)
            self._uow.users.delete(user)
            self._uow.commit()
        except SQLAlchemyError as e:
            return database_failure(self._uow, e, "Erreur lors de la suppression de l'utilisateur:")

        logger.info(f'User deleted: {user_id}')
        return ServiceResult(success=True, message='Utilisateur supprimé avec succès.')
