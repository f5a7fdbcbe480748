from datetime import datetime

import pytest

from recipebox import store
from recipebox.models import Recipe, User, db


def test_create_user_hashes_password(app):
    with app.app_context():
        user = store.create_user('Alice', 'alice@example.com', 'pw1')
        assert user.id is not None
        assert user.password_hash != 'pw1'
        assert store.check_password(user, 'pw1')
        assert not store.check_password(user, 'pw2')


def test_duplicate_email_leaves_first_user_unchanged(app):
    with app.app_context():
        first = store.create_user('Alice', 'alice@example.com', 'pw1')
        with pytest.raises(store.DuplicateEmailError):
            store.create_user('Mallory', 'alice@example.com', 'other')

        assert User.query.count() == 1
        same = store.find_user_by_email('alice@example.com')
        assert same.id == first.id
        assert same.name == 'Alice'
        assert store.check_password(same, 'pw1')


def test_email_is_normalized(app):
    with app.app_context():
        store.create_user('Alice', '  Alice@Example.COM ', 'pw1')
        assert store.find_user_by_email('alice@example.com') is not None
        with pytest.raises(store.DuplicateEmailError):
            store.create_user('Alice 2', 'ALICE@example.com', 'pw1')


def test_create_user_requires_email(app):
    with app.app_context():
        with pytest.raises(ValueError):
            store.create_user('Alice', '   ', 'pw1')
        assert User.query.count() == 0


def test_get_user_unknown(app):
    with app.app_context():
        assert store.get_user(42) is None
        assert store.get_user(None) is None


@pytest.mark.parametrize('raw', ['abc', '', None, '1.5', '999'])
def test_get_recipe_unresolvable_ids(app, users, make_recipe, raw):
    make_recipe(users['alice'])
    with app.app_context():
        assert store.get_recipe(raw) is None


def test_list_recipes_newest_first(app, users, make_recipe):
    first = make_recipe(users['alice'], 'First')
    second = make_recipe(users['bob'], 'Second')
    third = make_recipe(users['alice'], 'Third')
    with app.app_context():
        db.session.get(Recipe, first).created_at = datetime(2024, 1, 3)
        db.session.get(Recipe, second).created_at = datetime(2024, 1, 1)
        db.session.get(Recipe, third).created_at = datetime(2024, 1, 2)
        db.session.commit()

        recipes = store.list_recipes()
        assert [r.id for r in recipes] == [first, third, second]
        assert [r.owner.name for r in recipes] == ['Alice', 'Alice', 'Bob']


def test_list_recipes_ties_broken_by_id(app, users, make_recipe):
    ids = [make_recipe(users['alice'], f'R{i}') for i in range(3)]
    with app.app_context():
        for recipe_id in ids:
            db.session.get(Recipe, recipe_id).created_at = datetime(2024, 5, 5)
        db.session.commit()
        assert [r.id for r in store.list_recipes()] == list(reversed(ids))


def test_update_only_touches_supplied_fields(app, users, make_recipe):
    recipe_id = make_recipe(users['alice'], 'Soup', description='Warm', ingredients='water',
                            image='uploads/soup.jpg')
    with app.app_context():
        recipe = store.get_recipe(recipe_id)
        store.update_recipe(recipe, {'title': 'Better soup'})

        recipe = store.get_recipe(recipe_id)
        assert recipe.title == 'Better soup'
        assert recipe.description == 'Warm'
        assert recipe.ingredients == 'water'
        assert recipe.image == 'uploads/soup.jpg'
        assert recipe.user_id == users['alice']

        store.update_recipe(recipe, {}, image='uploads/new.jpg')
        assert store.get_recipe(recipe_id).image == 'uploads/new.jpg'


def test_delete_is_soft_and_terminal(app, users, make_recipe):
    recipe_id = make_recipe(users['alice'])
    with app.app_context():
        store.delete_recipe(store.get_recipe(recipe_id))

        assert store.get_recipe(recipe_id) is None
        assert store.list_recipes() == []
        row = db.session.get(Recipe, recipe_id)
        assert row is not None
        assert row.is_deleted
