from flask import Blueprint, jsonify, redirect, url_for, current_app, session
from auth_utils import current_ledger, login_required
from core.metrics import allocated_total
from core.rollover import compute_rollover
from forms import BudgetForm, CategoryLimitsForm, IncomeForm, RolloverForm, cents

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')

@settings_bp.route('/')
@login_required
def index():
    ledger = current_ledger()
    settings = ledger.get_settings()
    rollover = compute_rollover(settings.period, settings, ledger.list_expenses())
    return jsonify({
        "period": settings.period,
        "amount": float(settings.amount),
        "income": float(settings.income),
        "rollover_enabled": settings.rollover_enabled,
        "rollover_amount": float(rollover),
        "category_limits": {k: float(v) for k, v in settings.category_limits.items()},
        "allocated_total": float(allocated_total(settings.category_limits)),
    })

@settings_bp.route('/budget', methods=['POST'])
@login_required
def update_budget():
    form = BudgetForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400
    current_ledger().update_settings(amount=cents(form.amount.data))
    return redirect(url_for('settings.index'))

@settings_bp.route('/income', methods=['POST'])
@login_required
def update_income():
    form = IncomeForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400
    current_ledger().update_settings(income=cents(form.income.data))
    return redirect(url_for('settings.index'))

@settings_bp.route('/rollover', methods=['POST'])
@login_required
def update_rollover():
    form = RolloverForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400
    current_ledger().update_settings(rollover_enabled=form.enabled.data)
    return redirect(url_for('settings.index'))

@settings_bp.route('/category-limits', methods=['POST'])
@login_required
def update_category_limits():
    form = CategoryLimitsForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400

    ledger = current_ledger()
    settings = ledger.get_settings()
    limits = {c: cents(v) for c, v in form.limits().items()}
    if allocated_total(limits) > settings.amount:
        return jsonify({"errors": {"limits": ["Category limits add up to more than the monthly limit."]}}), 400

    ledger.update_settings(category_limits=limits)
    return redirect(url_for('settings.index'))

@settings_bp.route('/fresh-start', methods=['POST'])
@login_required
def fresh_start():
    current_ledger().reset()
    session.pop('chat_history', None)
    current_app.logger.info("Ledger reset to a fresh start")
    return redirect(url_for('settings.index'))
