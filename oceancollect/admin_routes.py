import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, make_response
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from oceancollect import container
from oceancollect.auth import admin_required
from oceancollect.domain import TemplateNotFoundError
from oceancollect.models_db import (
    UserRole, EstablishmentStatus, EstablishmentType, QuestionType, QuestionStatus,
)
from oceancollect.view_mode import resolve_view_mode, persist_view_mode

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

logger = logging.getLogger("oceancollect")

_ERROR_STATUS = {
    'NOT_FOUND': 404,
    'DB_ERROR': 500,
}


def _wants_json():
    return request.accept_mimetypes.best == 'application/json'


def _respond(result, endpoint, created=False, **values):
    """Flash + redirect (HTML) or JSON + status code, from a ServiceResult."""
    if _wants_json():
        if result.success:
            return jsonify({'success': True, 'message': result.message, 'data': result.data}), 201 if created else 200
        return jsonify({'error': result.message, 'code': result.error}), _ERROR_STATUS.get(result.error, 400)

    flash(result.message, 'success' if result.success else 'error')
    return redirect(url_for(endpoint, **values))


def _read_failure(entity_label, error):
    """Rollback + log after a failed read; returns the message shown to the admin."""
    container.get_uow().rollback()
    logger.error(f"❌ Erro de leitura ({entity_label}): {error}")
    return f"Erreur lors de la récupération des {entity_label}: {getattr(error, 'orig', None) or error}"


def _render_list(template, view_key, entity_label, loader, **context):
    """Render a list page with the remembered list/card preference."""
    view_mode, persist = resolve_view_mode(view_key)
    try:
        rows = loader()
    except SQLAlchemyError as e:
        flash(_read_failure(entity_label, e), 'error')
        rows = []

    response = make_response(render_template(template, rows=rows, view_mode=view_mode, view_key=view_key, **context))
    if persist:
        persist_view_mode(response, view_key, view_mode)
    return response


@admin_bp.route('')
@admin_bp.route('/')
@login_required
@admin_required
def index():
    return redirect(url_for('admin.dashboard'))


@admin_bp.route('/dashboard')
@login_required
@admin_required
def dashboard():
    kpis = container.get_dashboard_service().get_kpis()
    if _wants_json():
        return jsonify(kpis)
    return render_template('admin/dashboard.html', kpis=kpis)


# --- Users -------------------------------------------------------------

@admin_bp.route('/users')
@login_required
@admin_required
def users():
    service = container.get_user_service()
    return _render_list(
        'admin/users.html', 'users-view', 'utilisateurs', service.list_users,
        roles=list(UserRole),
    )


@admin_bp.route('/users/new', methods=['POST'])
@login_required
@admin_required
def create_user():
    result = container.get_user_service().create_user(request.form)
    return _respond(result, 'admin.users', created=True)


@admin_bp.route('/users/<uuid:user_id>/update', methods=['POST'])
@login_required
@admin_required
def update_user(user_id):
    result = container.get_user_service().update_user(user_id, request.form)
    return _respond(result, 'admin.users')


@admin_bp.route('/users/<uuid:user_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_user(user_id):
    result = container.get_user_service().delete_user(user_id, acting_user_id=current_user.id)
    return _respond(result, 'admin.users')


# --- Establishments ----------------------------------------------------

@admin_bp.route('/establishments')
@login_required
@admin_required
def establishments():
    service = container.get_establishment_service()
    return _render_list(
        'admin/establishments.html', 'establishments-view', 'établissements', service.list_establishments,
        statuses=list(EstablishmentStatus),
        types=list(EstablishmentType),
    )


@admin_bp.route('/establishments/new', methods=['POST'])
@login_required
@admin_required
def create_establishment():
    result = container.get_establishment_service().create_establishment(request.form, created_by=current_user.id)
    return _respond(result, 'admin.establishments', created=True)


@admin_bp.route('/establishments/<uuid:establishment_id>/update', methods=['POST'])
@login_required
@admin_required
def update_establishment(establishment_id):
    result = container.get_establishment_service().update_establishment(establishment_id, request.form)
    return _respond(result, 'admin.establishments')


@admin_bp.route('/establishments/<uuid:establishment_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_establishment(establishment_id):
    result = container.get_establishment_service().delete_establishment(establishment_id)
    return _respond(result, 'admin.establishments')


# --- Questions ---------------------------------------------------------

@admin_bp.route('/questions')
@login_required
@admin_required
def questions():
    service = container.get_question_service()
    return _render_list(
        'admin/questions.html', 'questions-view', 'questions', service.list_questions,
        question_types=list(QuestionType),
        statuses=list(QuestionStatus),
    )


@admin_bp.route('/questions/new', methods=['POST'])
@login_required
@admin_required
def create_question():
    result = container.get_question_service().create_question(request.form, created_by=current_user.id)
    return _respond(result, 'admin.questions', created=True)


@admin_bp.route('/questions/<uuid:question_id>/update', methods=['POST'])
@login_required
@admin_required
def update_question(question_id):
    result = container.get_question_service().update_question(question_id, request.form)
    return _respond(result, 'admin.questions')


@admin_bp.route('/questions/<uuid:question_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_question(question_id):
    result = container.get_question_service().delete_question(question_id)
    return _respond(result, 'admin.questions')


# --- Templates ---------------------------------------------------------

@admin_bp.route('/templates')
@login_required
@admin_required
def templates():
    service = container.get_template_service()
    return _render_list('admin/templates.html', 'templates-view', 'modèles', service.list_templates)


@admin_bp.route('/templates/new', methods=['POST'])
@login_required
@admin_required
def create_template():
    result = container.get_template_service().create_template(request.form, created_by=current_user.id)
    return _respond(result, 'admin.templates', created=True)


@admin_bp.route('/templates/<uuid:template_id>/update', methods=['POST'])
@login_required
@admin_required
def update_template(template_id):
    result = container.get_template_service().update_template(template_id, request.form)
    return _respond(result, 'admin.templates')


@admin_bp.route('/templates/<uuid:template_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_template(template_id):
    result = container.get_template_service().delete_template(template_id)
    return _respond(result, 'admin.templates')


def _question_json(question):
    return {
        'id': str(question.id),
        'question_text': question.question_text,
        'question_type': question.question_type.value,
        'category': question.category,
        'status': question.status.value,
    }


@admin_bp.route('/templates/<uuid:template_id>')
@login_required
@admin_required
def template_detail(template_id):
    service = container.get_template_service()
    try:
        template, items = service.get_detail(template_id)
    except TemplateNotFoundError as e:
        if _wants_json():
            return jsonify({'error': e.message}), 404
        flash(e.message, 'error')
        return redirect(url_for('admin.templates'))
    except SQLAlchemyError as e:
        message = _read_failure('modèles', e)
        if _wants_json():
            return jsonify({'error': message}), 500
        flash(message, 'error')
        return redirect(url_for('admin.templates'))

    if _wants_json():
        return jsonify({
            'id': str(template.id),
            'title': template.title,
            'description': template.description,
            'version': template.version,
            'items': [
                {'id': item.id, 'item_order': item.item_order, 'question': _question_json(item.question)}
                for item in items
            ],
        })

    search = (request.args.get('q') or '').strip()
    try:
        available = service.available_questions(template.id, search)
    except SQLAlchemyError as e:
        flash(_read_failure('questions', e), 'error')
        available = []
    return render_template(
        'admin/template_detail.html',
        template=template,
        items=items,
        available=available,
        search=search,
        open_picker=bool(request.args.get('pick') or search),
    )


@admin_bp.route('/templates/<uuid:template_id>/available-questions')
@login_required
@admin_required
def available_questions(template_id):
    service = container.get_template_service()
    try:
        service.get_detail(template_id)
        questions = service.available_questions(template_id, request.args.get('q'))
    except TemplateNotFoundError as e:
        return jsonify({'error': e.message}), 404
    except SQLAlchemyError as e:
        return jsonify({'error': _read_failure('questions', e)}), 500
    return jsonify({'questions': [_question_json(q) for q in questions]})


@admin_bp.route('/templates/<uuid:template_id>/questions', methods=['POST'])
@login_required
@admin_required
def add_template_questions(template_id):
    payload = request.get_json(silent=True) or {}
    question_ids = payload.get('question_ids') or request.form.getlist('question_ids')
    result = container.get_template_service().add_questions(template_id, question_ids)
    return _respond(result, 'admin.template_detail', template_id=template_id)


@admin_bp.route('/templates/<uuid:template_id>/items/<int:item_id>/delete', methods=['POST'])
@login_required
@admin_required
def remove_template_item(template_id, item_id):
    result = container.get_template_service().remove_item(template_id, item_id)
    return _respond(result, 'admin.template_detail', template_id=template_id)
