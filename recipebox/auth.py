from functools import wraps

from flask import Blueprint, current_app, g, redirect, render_template, request, session, url_for

from . import store
from .forms import LoginForm, RegisterForm, first_error

auth_bp = Blueprint('auth', __name__)

SESSION_USER_KEY = 'user_id'


# ---------------- Session ----------------

def establish_session(user_id):
    """Bind the (signed cookie) session to a user, dropping anything left over."""
    session.clear()
    session[SESSION_USER_KEY] = user_id


def resolve_session():
    """Return the user id stored in the session, or None if absent or malformed."""
    user_id = session.get(SESSION_USER_KEY)
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        return None
    return user_id


def clear_session():
    session.clear()


# ---------------- Gate ----------------

@auth_bp.before_app_request
def load_logged_in_user():
    user_id = resolve_session()
    g.user = store.get_user(user_id) if user_id is not None else None
    if user_id is not None and g.user is None:
        # cookie outlived its user row (e.g. a fresh database)
        current_app.logger.info('Dropping session for unknown user %s', user_id)
        clear_session()


@auth_bp.app_context_processor
def inject_current_user():
    user = g.get('user')
    return {'current_user': user, 'is_logged_in': user is not None}


def login_required(view):
    """Decorator for route handlers that require an authenticated user.

    Inside the wrapped view ``g.user`` is always a loaded ``User``.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        if g.get('user') is None:
            return redirect(url_for('auth.login'))
        return view(*args, **kwargs)
    return wrapped


# ---------------- Routes ----------------

def _render_auth(kind, form, error=None):
    return render_template('auth.html', type=kind, form=form, error=error)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    form = RegisterForm()
    if request.method == 'GET':
        return _render_auth('Register', form)
    if not form.validate():
        return _render_auth('Register', form, first_error(form))
    try:
        store.create_user(form.name.data, form.email.data, form.password.data)
    except store.DuplicateEmailError as e:
        current_app.logger.info('Registration refused, %s', e)
        return _render_auth('Register', form, 'Email already exists')
    return redirect(url_for('auth.login'))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    form = LoginForm()
    if request.method == 'GET':
        return _render_auth('Login', form)
    if not form.validate():
        return _render_auth('Login', form, first_error(form))
    user = store.find_user_by_email(form.email.data)
    if user is None:
        return _render_auth('Login', form, 'User not found')
    if not store.check_password(user, form.password.data):
        current_app.logger.info('Wrong password for user %s', user.id)
        return _render_auth('Login', form, 'Wrong password')
    establish_session(user.id)
    current_app.logger.info('User %s logged in', user.id)
    return redirect(url_for('recipes.dashboard'))


@auth_bp.route('/logout', methods=['POST'])
def logout():
    user = g.get('user')
    clear_session()
    if user is not None:
        current_app.logger.info('User %s logged out', user.id)
    return redirect(url_for('auth.login'))
