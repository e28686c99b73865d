import logging
import uuid
from functools import wraps
from urllib.parse import urlparse

from flask import Blueprint, render_template, redirect, url_for, request, flash
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from werkzeug.security import check_password_hash

from .container import get_uow
from .models_db import ADMIN_ROLES
from .infrastructure.security import login_limit

auth_bp = Blueprint('auth', __name__)
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Veuillez vous connecter pour accéder à cette page.'
login_manager.login_message_category = 'warning'

logger = logging.getLogger("oceancollect")


@login_manager.user_loader
def load_user(user_id):
    logger.debug(f"🔍 [load_user] Carregando usuário: {user_id}")
    try:
        user_uuid = uuid.UUID(str(user_id))
    except ValueError:
        return None

    try:
        uow = get_uow()
        user = uow.users.get_by_id(user_uuid)
        if not user:
            logger.debug(f"⚠️ [load_user] Usuário não encontrado ID: {user_id}")
        return user
    except Exception as e:
        logger.error(f"❌ [load_user] Erro ao carregar {user_id}: {e}")
        return None


def home_for_role(role):
    """URL da área inicial de acordo com o papel (role)."""
    if role in ADMIN_ROLES:
        return url_for('admin.dashboard')
    return url_for('member.dashboard')


def _is_safe_next(target):
    # Apenas caminhos relativos (evita open redirect)
    if not target or not target.startswith('/') or target.startswith('//'):
        return False
    return not urlparse(target).netloc


def admin_required(f):
    """Restringe a rota aos papéis Admin / Super Admin."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))
        if current_user.role not in ADMIN_ROLES:
            flash('Accès réservé aux administrateurs.', 'error')
            return redirect(url_for('member.dashboard'))
        return f(*args, **kwargs)
    return decorated_function


def member_required(f):
    """Qualquer usuário autenticado pode acessar a área de membro."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))
        return f(*args, **kwargs)
    return decorated_function


@auth_bp.route('/login', methods=['GET', 'POST'])
@login_limit()
def login():
    if current_user.is_authenticated:
        return redirect(url_for('root'))

    if request.method == 'POST':
        email = (request.form.get('email') or '').strip().lower()
        password = request.form.get('password') or ''
        remember = True if request.form.get('remember') else False

        uow = get_uow()
        try:
            user = uow.users.get_by_email(email)

            if not user or not user.is_active or not user.password_hash \
                    or not check_password_hash(user.password_hash, password):
                logger.warning(f"🔒 Falha de login para {email or '<vazio>'}")
                flash('Adresse e-mail ou mot de passe incorrect.', 'error')
                return render_template('login.html', email=email)

            login_user(user, remember=remember)
            logger.info(f"✅ Login: {user.id} ({user.role.value if user.role else 'sem perfil'})")
            flash('Connexion réussie !', 'success')

            next_page = request.args.get('next')
            if not _is_safe_next(next_page):
                next_page = home_for_role(user.role)
            return redirect(next_page)

        except Exception as e:
            uow.rollback()
            logger.error(f"❌ Erro no login: {e}")
            flash(f'Erreur lors de la connexion: {e}', 'error')

    return render_template('login.html')


@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    return redirect(url_for('auth.login'))
