import logging
from flask import current_app, request
from flask_login import login_required, current_user

from app import db
from app.auth import bp
from app.auth.tokens import issue_token
from app.exceptions import PayloadValidationError, ServiceError
from app.forms import RegisterForm, LoginForm, json_formdata, first_error
from app.models import User, Role
from app.utils import success

logger = logging.getLogger(__name__)


@bp.route('/register', methods=['POST'])
def register():
    form = RegisterForm(formdata=json_formdata(request.get_json(silent=True)))
    if not form.validate():
        logger.debug(f"Registratie ongeldig: {form.errors}")
        raise PayloadValidationError(first_error(form), form.errors)

    username = form.username.data.strip()
    role = Role.ADMIN.value if username in current_app.config['ADMIN_USERNAMES'] else Role.USER.value
    user = User(username=username, role=role)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    logger.debug(f"Gebruiker geregistreerd: {user.username} ({user.role})")

    return success({'token': issue_token(user), 'user': user.to_dict()}, 201)


@bp.route('/login', methods=['POST'])
def login():
    form = LoginForm(formdata=json_formdata(request.get_json(silent=True)))
    if not form.validate():
        raise PayloadValidationError(first_error(form), form.errors)

    user = User.query.filter_by(username=form.username.data.strip()).first()
    if user is None or not user.check_password(form.password.data):
        logger.debug(f"Mislukte login voor {form.username.data}")
        raise ServiceError('Usuario o contraseña incorrectos.', 401)

    logger.debug(f"Gebruiker ingelogd: id={user.id}, name={user.username}")
    return success({'token': issue_token(user), 'user': user.to_dict()})


@bp.route('/profile', methods=['GET'])
@login_required
def profile():
    logger.debug(f"Profile route, user: {current_user.username}")
    return success(current_user.to_dict())
