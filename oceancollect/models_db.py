from datetime import datetime
from enum import Enum
from typing import Optional, List
import uuid

from sqlalchemy import (
    String, Boolean, ForeignKey, Text, Integer, Float, TIMESTAMP, JSON,
    UniqueConstraint, Uuid,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import JSONB
from flask_login import UserMixin


# 1. Declaração Base
class Base(DeclarativeBase):
    pass


# 2. Enumerações (valores idênticos aos do banco Supabase)
class UserRole(str, Enum):
    SUPER_ADMIN = "Super Admin"
    ADMIN = "Admin"
    MANAGER = "Manager"
    MEMBER = "Membre"
    OBSERVER = "Observateur"


ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPER_ADMIN)


class EstablishmentStatus(str, Enum):
    ACTIVE = "Actif"
    INACTIVE = "Inactif"
    TO_VERIFY = "À vérifier"


class EstablishmentType(str, Enum):
    SCHOOL = "École"
    HIGH_SCHOOL = "Lycée"
    UNIVERSITY = "Université"
    TRAINING_CENTER = "Centre de formation"


class QuestionType(str, Enum):
    SHORT_TEXT = "Texte court"
    LONG_TEXT = "Texte long"
    NUMERIC = "Numérique"
    YES_NO = "Oui/Non"
    SINGLE_CHOICE = "Choix unique"
    MULTIPLE_CHOICE = "Choix multiple"
    SCALE = "Échelle"
    DATETIME = "Date/Heure"


CHOICE_QUESTION_TYPES = (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE)


class QuestionStatus(str, Enum):
    PROPOSAL = "Proposition"
    IN_REVIEW = "En revue"
    VALIDATED = "Validé"
    ARCHIVED = "Archivé"


def _enum_column(enum_cls):
    """Stores the enum *value* (e.g. 'Super Admin') instead of the member name."""
    return SAEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
    )


# 3. Tabelas
class User(UserMixin, Base):
    """Conta de autenticação. O papel (role) fica no Profile."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=datetime.utcnow)

    profile: Mapped[Optional["Profile"]] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan", lazy="joined",
    )

    @property
    def role(self) -> Optional[UserRole]:
        return self.profile.role if self.profile else None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    first_name: Mapped[Optional[str]] = mapped_column(String)
    last_name: Mapped[Optional[str]] = mapped_column(String)
    role: Mapped[UserRole] = mapped_column(_enum_column(UserRole), nullable=False, default=UserRole.MEMBER)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=datetime.utcnow)

    user: Mapped["User"] = relationship(back_populates="profile")

    @property
    def email(self) -> Optional[str]:
        # Derivado da conta (equivalente à view user_details)
        return self.user.email if self.user else None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def initials(self) -> str:
        return f"{(self.first_name or '')[:1]}{(self.last_name or '')[:1]}".upper()


class Establishment(Base):
    __tablename__ = "establishments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=datetime.utcnow)

    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False, default=EstablishmentType.SCHOOL.value)
    address: Mapped[Optional[str]] = mapped_column(Text)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    contact_name: Mapped[Optional[str]] = mapped_column(String)
    contact_email: Mapped[Optional[str]] = mapped_column(String)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[EstablishmentStatus] = mapped_column(
        _enum_column(EstablishmentStatus), nullable=False, default=EstablishmentStatus.TO_VERIFY,
    )

    responsible_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.id"), nullable=True)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=datetime.utcnow)

    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[QuestionType] = mapped_column(
        _enum_column(QuestionType), nullable=False, default=QuestionType.SHORT_TEXT,
    )
    category: Mapped[Optional[str]] = mapped_column(String)
    options: Mapped[Optional[list]] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    status: Mapped[QuestionStatus] = mapped_column(
        _enum_column(QuestionStatus), nullable=False, default=QuestionStatus.PROPOSAL,
    )

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.id"), nullable=True)


class QuestionTemplate(Base):
    __tablename__ = "question_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=datetime.utcnow)

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.id"), nullable=True)

    items: Mapped[List["QuestionTemplateItem"]] = relationship(
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="QuestionTemplateItem.item_order",
    )


class QuestionTemplateItem(Base):
    __tablename__ = "question_template_items"
    __table_args__ = (
        UniqueConstraint("template_id", "question_id", name="uq_template_question"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    template_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("question_templates.id"), nullable=False, index=True)
    question_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("questions.id"), nullable=False)
    item_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    template: Mapped["QuestionTemplate"] = relationship(back_populates="items")
    question: Mapped["Question"] = relationship(lazy="joined")
