"""Repository for Establishment entities."""
from typing import Optional, List
import uuid

from oceancollect.models_db import Establishment


class EstablishmentRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: uuid.UUID) -> Optional[Establishment]:
        return self._session.get(Establishment, id)

    def get_all(self) -> List[Establishment]:
        return self._session.query(Establishment).order_by(Establishment.created_at.desc()).all()

    def count(self) -> int:
        return self._session.query(Establishment).count()

    def detach_user(self, user_id: uuid.UUID) -> None:
        """Clear creator/responsible references to a user being removed."""
        self._session.query(Establishment).filter(
            Establishment.created_by == user_id,
        ).update({Establishment.created_by: None}, synchronize_session=False)
        self._session.query(Establishment).filter(
            Establishment.responsible_id == user_id,
        ).update({Establishment.responsible_id: None}, synchronize_session=False)

    def add(self, establishment: Establishment) -> Establishment:
        self._session.add(establishment)
        return establishment

    def delete(self, establishment: Establishment) -> None:
        self._session.delete(establishment)
