import re
from flask import Blueprint, jsonify, request
from auth_utils import current_ledger, login_required
from core.metrics import category_totals, index_by_period, total_spent, trailing_trend
from core.rollover import compute_rollover
from routes.expenses import expense_json

history_bp = Blueprint('history', __name__, url_prefix='/history')

PERIOD_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')
TREND_MONTHS = 6

@history_bp.route('/')
@login_required
def index():
    ledger = current_ledger()
    settings = ledger.get_settings()
    history = ledger.list_expenses()
    by_period = index_by_period(history)
    months = sorted(by_period, reverse=True)

    selected_period = request.args.get('period') or (months[0] if months else None)
    if selected_period and not PERIOD_RE.match(selected_period):
        return jsonify({"errors": {"period": ["Expected YYYY-MM."]}}), 400

    detail = None
    if selected_period:
        expenses = by_period.get(selected_period, [])
        spent = total_spent(expenses)
        detail = {
            "period": selected_period,
            "expenses": [expense_json(e) for e in expenses],
            "total_spent": float(spent),
            "category_totals": {k: float(v) for k, v in category_totals(expenses).items()},
            "rollover_in": float(compute_rollover(selected_period, settings, history)),
            "limit": float(settings.amount),
            "trend": [
                {"period": p.period, "spent": float(p.spent), "budget": float(p.budget)}
                for p in trailing_trend(history, selected_period, TREND_MONTHS, settings.amount)
            ],
        }

    return jsonify({
        "months": months,
        "selected_period": selected_period,
        "detail": detail,
    })
