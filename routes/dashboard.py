from flask import Blueprint, jsonify
from auth_utils import current_ledger, login_required
from advisor.service import current_advice
from advisor.snapshot import build_snapshot
from core.domain import category_color
from core.metrics import category_usage, goal_progress
from routes.expenses import expense_json

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='')

RECENT_EXPENSES = 5

@dashboard_bp.route('/')
@login_required
def index():
    ledger = current_ledger()
    snapshot = build_snapshot(ledger)
    settings, metrics, goal = snapshot.settings, snapshot.metrics, snapshot.goal

    # Pie chart (category-wise)
    pie = [
        {"category": c, "total": float(t), "color": category_color(c)}
        for c, t in sorted(metrics.category_totals.items(), key=lambda item: item[1], reverse=True)
    ]

    usage = [
        {"category": u.category, "limit": float(u.limit), "spent": float(u.spent),
         "percent": round(u.percent, 1), "status": u.status}
        for u in category_usage(settings.category_limits, metrics.category_totals)
    ]

    advice = current_advice(ledger, snapshot)
    user = ledger.get_user()

    return jsonify({
        "user": user.username,
        "period": settings.period,
        "budget": {
            "amount": float(settings.amount),
            "income": float(settings.income),
            "rollover_enabled": settings.rollover_enabled,
        },
        "metrics": metrics.to_dict(),
        "categories": pie,
        "category_usage": usage,
        "recent_expenses": [expense_json(e) for e in reversed(snapshot.period_expenses[-RECENT_EXPENSES:])],
        "goal": goal.to_record() if goal else None,
        "goal_progress": goal_progress(goal, metrics.net_surplus),
        "advice": advice.model_dump() if advice else None,
        "quest": ledger.get_quest(),
        "persona": ledger.get_persona(),
    })
