"""
Input forms.

Validation of user input happens here, at the edge; the ledger itself stores
whatever it is given.
"""

from decimal import Decimal

from flask_wtf import FlaskForm
from wtforms import BooleanField, DateField, DecimalField, SelectField, StringField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, ValidationError

from core.domain import CATEGORIES, FREQUENCIES, SENTIMENTS


def cents(value: Decimal) -> Decimal:
    return value.quantize(Decimal('0.01'))


class RegisterForm(FlaskForm):
    username = StringField('Name', validators=[DataRequired(), Length(max=60)])


class ExpenseForm(FlaskForm):
    description = StringField('Description', validators=[DataRequired(), Length(max=200)])
    amount = DecimalField('Amount', places=2, validators=[InputRequired(), NumberRange(min=0.01)])
    category = SelectField('Category', choices=[(c, c) for c in CATEGORIES], default=CATEGORIES[0])
    is_recurring = BooleanField('Recurring')
    frequency = SelectField('Frequency', choices=[('', '')] + [(f, f) for f in FREQUENCIES],
                            validate_choice=False)
    sentiment = SelectField('Sentiment', choices=[('', '')] + [(s, s) for s in SENTIMENTS],
                            validators=[Optional()])
    note = StringField('Note', validators=[Optional(), Length(max=500)])

    def validate_frequency(self, field):
        if field.data and field.data not in FREQUENCIES:
            raise ValidationError('Not a valid choice.')
        if self.is_recurring.data and not field.data:
            raise ValidationError('Recurring expenses need a frequency.')


class BudgetForm(FlaskForm):
    amount = DecimalField('Monthly limit', places=2, validators=[InputRequired(), NumberRange(min=0)])


class IncomeForm(FlaskForm):
    income = DecimalField('Monthly income', places=2, validators=[InputRequired(), NumberRange(min=0)])


class RolloverForm(FlaskForm):
    enabled = BooleanField('Roll unspent budget into next month')


class GoalForm(FlaskForm):
    title = StringField('Goal', validators=[DataRequired(), Length(max=120)])
    target_amount = DecimalField('Target', places=2, validators=[InputRequired(), NumberRange(min=0.01)])
    deadline = DateField('Deadline', validators=[InputRequired()])


class ChatForm(FlaskForm):
    message = StringField('Message', validators=[DataRequired(), Length(max=1000)])


class CategoryLimitsForm(FlaskForm):
    """One optional cap per category; blank means no cap."""

    def limits(self):
        return {c: getattr(self, c.lower()).data for c in CATEGORIES if getattr(self, c.lower()).data is not None}


for _category in CATEGORIES:
    setattr(CategoryLimitsForm, _category.lower(),
            DecimalField(_category, places=2, validators=[Optional(), NumberRange(min=0)]))
