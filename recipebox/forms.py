from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import PasswordField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, Optional


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class RegisterForm(FlaskForm):
    name = StringField('Name', filters=[_strip], validators=[DataRequired(), Length(max=120)])
    email = StringField('Email', filters=[_strip], validators=[DataRequired(), Length(max=120)])
    password = PasswordField('Password', validators=[InputRequired(), Length(max=256)])


class LoginForm(FlaskForm):
    email = StringField('Email', filters=[_strip], validators=[DataRequired()])
    password = PasswordField('Password', validators=[InputRequired()])


class RecipeForm(FlaskForm):
    title = StringField('Title', validators=[Optional(), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=5000)])
    ingredients = TextAreaField('Ingredients', validators=[Optional(), Length(max=10000)])
    instructions = TextAreaField('Instructions', validators=[Optional(), Length(max=20000)])
    image = FileField('Image')

    def text_fields(self):
        return (self.title, self.description, self.ingredients, self.instructions)

    def supplied(self):
        """Text fields that were actually present in the submitted form."""
        return {field.name: field.data for field in self.text_fields() if getattr(field, 'raw_data', None)}


class CreateRecipeForm(RecipeForm):
    title = StringField('Title', validators=[InputRequired(), Length(max=200)])


def first_error(form):
    """First validation message of a form, for inline display."""
    for field_name, messages in form.errors.items():
        if not messages:
            continue
        # form-level errors are keyed by None
        field = form[field_name] if field_name else None
        label = field.label.text if field is not None and field_name != 'csrf_token' else None
        return f'{label}: {messages[0]}' if label else messages[0]
    return None
