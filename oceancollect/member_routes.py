import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify
from flask_login import login_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from oceancollect import container
from oceancollect.auth import member_required
from oceancollect.models_db import QuestionType

member_bp = Blueprint('member', __name__, url_prefix='/member')

logger = logging.getLogger("oceancollect")

CONTRIBUTION_TABS = ('questions', 'forms')


@member_bp.route('')
@member_bp.route('/')
@login_required
@member_required
def index():
    return redirect(url_for('member.dashboard'))


@member_bp.route('/dashboard')
@login_required
@member_required
def dashboard():
    profile = current_user.profile
    first_name = (profile.first_name if profile else None) or 'Membre'
    return render_template('member/dashboard.html', first_name=first_name)


@member_bp.route('/propose-question', methods=['GET', 'POST'])
@login_required
@member_required
def propose_question():
    if request.method == 'POST':
        result = container.get_question_service().propose_question(request.form, user_id=current_user.id)

        if request.accept_mimetypes.best == 'application/json':
            if result.success:
                return jsonify({'success': True, 'message': result.message, 'data': result.data}), 201
            return jsonify({'error': result.message, 'code': result.error}), 400

        if result.success:
            flash(result.message, 'success')
            return redirect(url_for('member.contributions'))
        flash(result.message, 'error')
        return render_template('member/propose_question.html', question_types=list(QuestionType), form=request.form)

    return render_template('member/propose_question.html', question_types=list(QuestionType), form={})


@member_bp.route('/contributions')
@login_required
@member_required
def contributions():
    tab = request.args.get('tab', 'questions')
    if tab not in CONTRIBUTION_TABS:
        tab = 'questions'

    questions = []
    if tab == 'questions':
        try:
            questions = container.get_question_service().list_for_creator(current_user.id)
        except SQLAlchemyError as e:
            container.get_uow().rollback()
            logger.error(f"❌ Erro ao carregar contribuições de {current_user.id}: {e}")
            flash(f"Erreur lors de la récupération des questions: {getattr(e, 'orig', None) or e}", 'error')

    return render_template('member/contributions.html', tab=tab, questions=questions)
