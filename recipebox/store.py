"""Read/write operations on users and recipes.

Handlers go through these functions instead of touching ``db.session``
directly, so commit/rollback handling lives in one place.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload
from werkzeug.security import check_password_hash, generate_password_hash

from .models import Recipe, User, db, utcnow

RECIPE_FIELDS = ('title', 'description', 'ingredients', 'instructions')


class DuplicateEmailError(Exception):
    """Raised when registering an email that already has an account."""

    def __init__(self, email):
        super().__init__(f'email already registered: {email}')
        self.email = email


def normalize_email(email):
    return (email or '').strip().lower()


# ---------------- Users ----------------

def create_user(name, email, password):
    email = normalize_email(email)
    if not email:
        raise ValueError('email is required')
    user = User(
        name=(name or '').strip(),
        email=email,
        password_hash=generate_password_hash(password),
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise DuplicateEmailError(email) from e
    current_app.logger.info('Registered user %s (%s)', user.id, email)
    return user


def get_user(user_id):
    if user_id is None:
        return None
    return db.session.get(User, user_id)


def find_user_by_email(email):
    return User.query.filter_by(email=normalize_email(email)).first()


def check_password(user, password):
    return check_password_hash(user.password_hash, password or '')


# ---------------- Recipes ----------------

def _live_recipes():
    return Recipe.query.filter(Recipe.deleted_at.is_(None))


def list_recipes():
    """All live recipes, newest first, with owners loaded."""
    return (
        _live_recipes()
        .options(joinedload(Recipe.owner))
        .order_by(Recipe.created_at.desc(), Recipe.id.desc())
        .all()
    )


def get_recipe(recipe_id):
    """Look up a live recipe by the raw id taken from the URL.

    Returns None for ids that are not integers, unknown, or deleted.
    """
    try:
        recipe_id = int(recipe_id)
    except (TypeError, ValueError):
        return None
    return _live_recipes().options(joinedload(Recipe.owner)).filter(Recipe.id == recipe_id).first()


def create_recipe(owner, title='', description='', ingredients='', instructions='', image=None):
    recipe = Recipe(
        title=title or '',
        description=description or '',
        ingredients=ingredients or '',
        instructions=instructions or '',
        image=image,
        user_id=owner.id,
    )
    db.session.add(recipe)
    db.session.commit()
    current_app.logger.info('User %s created recipe %s', owner.id, recipe.id)
    return recipe


def update_recipe(recipe, fields, image=None):
    """Overwrite the given fields; keep the current image unless a new one is passed."""
    for name in RECIPE_FIELDS:
        if name in fields:
            setattr(recipe, name, fields[name] or '')
    if image:
        recipe.image = image
    db.session.commit()
    current_app.logger.info('Recipe %s updated (%s)', recipe.id, ', '.join(sorted(fields)) or 'no fields')
    return recipe


def delete_recipe(recipe):
    # soft delete: the row stays, but every lookup above ignores it
    recipe.deleted_at = utcnow()
    db.session.commit()
    current_app.logger.info('Recipe %s deleted', recipe.id)
