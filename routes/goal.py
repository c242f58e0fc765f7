from flask import Blueprint, jsonify, redirect, url_for
from auth_utils import current_ledger, login_required
from core.domain import SavingsGoal
from core.metrics import goal_progress, total_spent
from forms import GoalForm, cents

goal_bp = Blueprint('goal', __name__, url_prefix='/goal')

@goal_bp.route('/')
@login_required
def index():
    ledger = current_ledger()
    settings = ledger.get_settings()
    goal = ledger.get_goal()
    spent = total_spent(ledger.period_expenses(settings.period))
    net_surplus = settings.income - spent
    return jsonify({
        "goal": goal.to_record() if goal else None,
        "current_savings": float(net_surplus),
        "progress": goal_progress(goal, net_surplus),
    })

@goal_bp.route('/', methods=['POST'])
@login_required
def save_goal():
    form = GoalForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400

    current_ledger().save_goal(SavingsGoal(
        title=form.title.data.strip(),
        target_amount=cents(form.target_amount.data),
        deadline=form.deadline.data.isoformat(),
    ))
    return redirect(url_for('goal.index'))

@goal_bp.route('/clear', methods=['POST'])
@login_required
def clear_goal():
    current_ledger().clear_goal()
    return redirect(url_for('goal.index'))
