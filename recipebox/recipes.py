from flask import Blueprint, current_app, g, redirect, render_template, request, url_for

from . import store
from .auth import login_required
from .forms import CreateRecipeForm, RecipeForm, first_error
from .uploads import UploadError, save_upload

recipes_bp = Blueprint('recipes', __name__)


def _owned_recipe(recipe_id):
    """The live recipe with this id if the current user owns it, else None.

    Missing and foreign recipes look the same to callers.
    """
    recipe = store.get_recipe(recipe_id)
    if recipe is None:
        return None
    if recipe.user_id != g.user.id:
        current_app.logger.warning('User %s denied access to recipe %s owned by %s',
                                   g.user.id, recipe.id, recipe.user_id)
        return None
    return recipe


@recipes_bp.route('/')
def dashboard():
    # public; owner-only links are decided in the template from current_user
    return render_template('dashboard.html', recipes=store.list_recipes())


@recipes_bp.route('/recipe/<recipe_id>')
def detail(recipe_id):
    recipe = store.get_recipe(recipe_id)
    if recipe is None:
        return redirect(url_for('recipes.dashboard'))
    return render_template('detail.html', recipe=recipe)


@recipes_bp.route('/create', methods=['GET', 'POST'])
@login_required
def create():
    form = CreateRecipeForm()
    error = None
    if request.method == 'POST':
        if form.validate():
            image = None
            if form.image.data:
                try:
                    image = save_upload(form.image.data)
                except UploadError as e:
                    current_app.logger.warning('Upload failed for user %s: %s', g.user.id, e)
                    return 'Upload failed', 400
            store.create_recipe(
                g.user,
                title=form.title.data,
                description=form.description.data,
                ingredients=form.ingredients.data,
                instructions=form.instructions.data,
                image=image,
            )
            return redirect(url_for('recipes.dashboard'))
        error = first_error(form)
    return render_template('create.html', form=form, error=error)


@recipes_bp.route('/edit/<recipe_id>', methods=['GET'])
@login_required
def edit(recipe_id):
    recipe = _owned_recipe(recipe_id)
    if recipe is None:
        return redirect(url_for('recipes.dashboard'))
    return render_template('edit.html', recipe=recipe, form=RecipeForm(obj=recipe))


@recipes_bp.route('/edit/<recipe_id>', methods=['POST'])
@login_required
def update(recipe_id):
    # ownership is checked again here, the edit form may be stale
    recipe = _owned_recipe(recipe_id)
    if recipe is None:
        return redirect(url_for('recipes.dashboard'))

    form = RecipeForm()
    if not form.validate():
        return render_template('edit.html', recipe=recipe, form=form, error=first_error(form))

    image = None
    if form.image.data:
        try:
            image = save_upload(form.image.data)
        except UploadError as e:
            # keep the old image, the text changes still go through
            current_app.logger.warning('Upload failed for recipe %s: %s', recipe.id, e)

    store.update_recipe(recipe, form.supplied(), image=image)
    return redirect(url_for('recipes.detail', recipe_id=recipe.id))


@recipes_bp.route('/delete/<recipe_id>', methods=['POST'])
@login_required
def delete(recipe_id):
    recipe = _owned_recipe(recipe_id)
    if recipe is not None:
        store.delete_recipe(recipe)
    return redirect(url_for('recipes.dashboard'))
