from flask import Blueprint, jsonify, request, redirect, url_for
from auth_utils import current_ledger, login_required
from core.domain import category_color
from core.metrics import annualized_recurring_cost, total_spent
from forms import ExpenseForm, cents

expenses_bp = Blueprint('expenses', __name__, url_prefix='/expenses')

def expense_json(e):
    return {
        "id": e.id,
        "description": e.description,
        "amount": float(e.amount),
        "category": e.category,
        "color": category_color(e.category),
        "date": e.timestamp,
        "is_recurring": e.is_recurring,
        "frequency": e.frequency,
        "sentiment": e.sentiment,
        "note": e.note,
    }

@expenses_bp.route('/')
@login_required
def index():
    ledger = current_ledger()
    settings = ledger.get_settings()
    expenses = ledger.period_expenses(settings.period)

    term = request.args.get('q', '').strip().lower()
    if term:
        expenses = [e for e in expenses if term in e.description.lower() or term in e.category.lower()]

    return jsonify({
        "period": settings.period,
        "expenses": [expense_json(e) for e in reversed(expenses)],
        "total": float(total_spent(expenses)),
        "count": len(expenses),
    })

@expenses_bp.route('/add', methods=['POST'])
@login_required
def add_expense():
    form = ExpenseForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400

    current_ledger().add_expense(
        description=form.description.data.strip(),
        amount=cents(form.amount.data),
        category=form.category.data,
        is_recurring=form.is_recurring.data,
        frequency=form.frequency.data or None,
        sentiment=form.sentiment.data or None,
        note=(form.note.data or '').strip() or None,
    )
    return redirect(url_for('expenses.index'))

@expenses_bp.route('/delete/<expense_id>', methods=['POST'])
@login_required
def delete_expense(expense_id):
    current_ledger().delete_expense(expense_id)
    return redirect(url_for('expenses.index'))

@expenses_bp.route('/subscriptions')
@login_required
def subscriptions():
    ledger = current_ledger()
    settings = ledger.get_settings()
    recurring = [e for e in ledger.period_expenses(settings.period) if e.is_recurring]
    return jsonify({
        "subscriptions": [expense_json(e) for e in recurring],
        "count": len(recurring),
        "annual_total": float(annualized_recurring_cost(recurring)),
    })
