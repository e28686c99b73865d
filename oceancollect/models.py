"""Form payloads validated with pydantic before they reach the services."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from oceancollect.domain.exceptions import ValidationError
from oceancollect.models_db import (
    UserRole, EstablishmentStatus, EstablishmentType, QuestionType, QuestionStatus,
    CHOICE_QUESTION_TYPES,
)

FIELD_LABELS = {
    'first_name': 'Prénom',
    'last_name': 'Nom de famille',
    'email': 'Adresse e-mail',
    'password': 'Mot de passe',
    'role': 'Rôle',
    'name': "Nom de l'établissement",
    'type': 'Type',
    'latitude': 'Latitude',
    'longitude': 'Longitude',
    'status': 'Statut',
    'question_text': 'Texte de la question',
    'question_type': 'Type de question',
    'title': 'Titre du modèle',
}


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _FormModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')


class SignUpPayload(_FormModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.MEMBER


class ProfileUpdatePayload(_FormModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: UserRole


class EstablishmentPayload(_FormModel):
    name: str = Field(min_length=1)
    type: str = Field(default=EstablishmentType.SCHOOL.value, min_length=1)
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    notes: Optional[str] = None
    status: EstablishmentStatus = EstablishmentStatus.TO_VERIFY

    @field_validator('address', 'latitude', 'longitude', 'contact_name', 'contact_email', 'notes', mode='before')
    @classmethod
    def empty_as_none(cls, value):
        return _blank_to_none(value)


class QuestionPayload(_FormModel):
    question_text: str = Field(min_length=1)
    question_type: QuestionType = QuestionType.SHORT_TEXT
    category: Optional[str] = None
    options: Optional[List[str]] = None
    status: QuestionStatus = QuestionStatus.PROPOSAL

    @field_validator('category', mode='before')
    @classmethod
    def empty_category(cls, value):
        return _blank_to_none(value)

    @field_validator('options', mode='before')
    @classmethod
    def split_options(cls, value):
        # Textarea: uma opção por linha
        if isinstance(value, str):
            value = [line.strip() for line in value.splitlines()]
        if value is None:
            return None
        cleaned = [opt.strip() for opt in value if opt and opt.strip()]
        return cleaned or None

    @model_validator(mode='after')
    def options_only_for_choices(self):
        if self.question_type not in CHOICE_QUESTION_TYPES:
            self.options = None
        return self


class TemplatePayload(_FormModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None

    @field_validator('description', mode='before')
    @classmethod
    def empty_description(cls, value):
        return _blank_to_none(value)


def parse_form(model_cls, data):
    """
    Validate raw form data against a payload model.

    Raises:
        ValidationError (domain) with a French message naming the first bad field.
    """
    try:
        return model_cls.model_validate(dict(data))
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first['loc'][0]) if first.get('loc') else None
        label = FIELD_LABELS.get(field, field or 'formulaire')
        if field == 'password' and first.get('type') == 'string_too_short':
            raise ValidationError('Le mot de passe doit contenir au moins 6 caractères.', field) from e
        raise ValidationError(f'Champ invalide ou manquant : {label}.', field) from e
