import json
import logging
import traceback

from flask import Flask, request, redirect, url_for, flash
from dotenv import load_dotenv

# Carrega variáveis de ambiente
load_dotenv()
from oceancollect.config import config


# Configuração de Logs (JSON Estruturado)
class JsonFormatter(logging.Formatter):
    def format(self, record):
        json_log = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "timestamp": self.formatTime(record, self.datefmt),
            "logger": record.name,
            "module": record.module,
        }
        if hasattr(record, "props"):
            json_log.update(record.props)

        if record.exc_info:
            json_log["exception"] = self.formatException(record.exc_info)

        return json.dumps(json_log, ensure_ascii=False)


handler = logging.StreamHandler()
handler.setFormatter(JsonFormatter())
logging.basicConfig(level=config.LOG_LEVEL, handlers=[handler])
logger = logging.getLogger("oceancollect")
logger.setLevel(config.LOG_LEVEL)

app = Flask(__name__, template_folder='templates', static_folder='static')

# Flask Extensions
from flask_wtf.csrf import CSRFProtect
from flask_login import current_user, logout_user
from werkzeug.middleware.proxy_fix import ProxyFix

# App Imports
from oceancollect import database
from oceancollect.database import init_db, create_schema
from oceancollect.container import teardown_uow
from oceancollect.auth import login_manager, home_for_role, member_required
from oceancollect.infrastructure.security import init_limiter
from oceancollect.ui import register_filters
from oceancollect.view_mode import is_valid, persist_view_mode

# Configurações do App
app.config['SECRET_KEY'] = config.SECRET_KEY
app.config['SESSION_COOKIE_SECURE'] = config.SESSION_COOKIE_SECURE
app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
app.config['RATELIMIT_ENABLED'] = config.RATELIMIT_ENABLED
csrf = CSRFProtect(app)

# Load Balancer Fix (HTTPS / CSRF)
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

# Inicializa Flask-Login e Rate Limiter
login_manager.init_app(app)
init_limiter(app)
register_filters(app)

# Registra Blueprints
logger.info("🔧 Carregando Blueprints...")
try:
    from oceancollect.auth import auth_bp
    from oceancollect.admin_routes import admin_bp
    from oceancollect.member_routes import member_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(member_bp)
    logger.info("✅ Blueprints Registrados: auth, admin, member")
    logger.debug(f"📍 Rotas Registradas: {[str(p) for p in app.url_map.iter_rules()]}")

except Exception as bp_error:
    logger.error(f"❌ Erro Crítico ao registrar Blueprints: {bp_error}")
    raise bp_error


# Inicializa Banco de Dados
try:
    init_db()
    if database.engine is not None:
        create_schema()
    logger.info("✅ Banco de dados inicializado com sucesso")
except Exception as e:
    logger.error(f"❌ Falha crítica na inicialização do Banco de Dados: {e}")
    raise e


@app.cli.command('init-db')
def init_db_command():
    """Cria as tabelas do banco (idempotente)."""
    create_schema()
    logger.info("✅ Schema criado")


@app.errorhandler(500)
def handle_500(e):
    tb = traceback.format_exc()
    logger.error(f"💥 ERRO 500 DETECTADO: {e}\nTraceback:\n{tb}")
    # Resposta simples para evitar 500 recursivo (erros de template)
    return "Erreur interne du serveur (500). Consultez les journaux.", 500


@app.teardown_appcontext
def shutdown_session(exception=None):
    from oceancollect.database import db_session
    if db_session:
        db_session.remove()


# Registrado por último: roda antes do shutdown_session
app.teardown_appcontext(teardown_uow)


@app.context_processor
def inject_user_profile():
    profile = getattr(current_user, 'profile', None) if current_user.is_authenticated else None
    return {'profile': profile}


@app.route('/')
def root():
    if not current_user.is_authenticated:
        return redirect(url_for('auth.login'))

    logger.debug(f"🏠 Acessando root (User: {current_user.id})")
    if getattr(current_user, 'profile', None) is None:
        logger.error(f"❌ Perfil ausente para o usuário {current_user.id}")
        logout_user()
        flash('Erreur critique: Impossible de charger le profil.', 'error')
        return redirect(url_for('auth.login'))

    return redirect(home_for_role(current_user.role))


@app.route('/view-mode', methods=['POST'])
@member_required
def set_view_mode():
    key = request.form.get('key')
    mode = request.form.get('mode')
    next_page = request.form.get('next') or url_for('root')
    if not next_page.startswith('/') or next_page.startswith('//'):
        next_page = url_for('root')

    response = redirect(next_page)
    if is_valid(key, mode):
        persist_view_mode(response, key, mode)
    else:
        logger.warning(f"⚠️ Preferência de exibição inválida: {key}={mode}")
    return response


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000)
