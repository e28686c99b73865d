"""Repository for User accounts and their Profile."""
from typing import Optional, List
import uuid

from sqlalchemy.orm import joinedload

from oceancollect.models_db import User, Profile


class UserRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: uuid.UUID) -> Optional[User]:
        return self._session.get(User, id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._session.query(User).filter(User.email == email.strip().lower()).first()

    def get_profile(self, id: uuid.UUID) -> Optional[Profile]:
        return self._session.get(Profile, id)

    def get_all_profiles(self) -> List[Profile]:
        """Profiles with account email loaded, newest first."""
        return self._session.query(Profile).options(
            joinedload(Profile.user),
        ).order_by(Profile.created_at.desc()).all()

    def count_profiles(self) -> int:
        return self._session.query(Profile).count()

    def add(self, user: User) -> User:
        self._session.add(user)
        return user

    def delete(self, user: User) -> None:
        self._session.delete(user)
