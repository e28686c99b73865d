"""Badge colours used by the list pages (registered as Jinja filters)."""
from oceancollect.models_db import ADMIN_ROLES, UserRole, EstablishmentStatus, QuestionStatus


def _value(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def role_badge(role) -> str:
    role = _value(UserRole, role)
    if role in ADMIN_ROLES:
        return 'badge-red'
    if role == UserRole.MANAGER:
        return 'badge-yellow'
    return 'badge-green'


def establishment_status_badge(status) -> str:
    status = _value(EstablishmentStatus, status)
    if status == EstablishmentStatus.ACTIVE:
        return 'badge-green'
    if status == EstablishmentStatus.INACTIVE:
        return 'badge-gray'
    return 'badge-yellow'


def question_status_badge(status) -> str:
    return {
        QuestionStatus.VALIDATED: 'badge-green',
        QuestionStatus.IN_REVIEW: 'badge-yellow',
        QuestionStatus.PROPOSAL: 'badge-blue',
    }.get(_value(QuestionStatus, status), 'badge-gray')


def register_filters(app):
    app.add_template_filter(role_badge, 'role_badge')
    app.add_template_filter(establishment_status_badge, 'establishment_status_badge')
    app.add_template_filter(question_status_badge, 'question_status_badge')
