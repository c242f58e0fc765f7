import asyncio
from flask import Blueprint, jsonify, redirect, url_for, current_app, session
from auth_utils import current_ledger, login_required
from advisor.schemas import ChatMessage
from advisor.service import accept_quest, current_advice, refresh_advice
from advisor.snapshot import build_snapshot
from forms import ChatForm

advisor_bp = Blueprint('advisor', __name__, url_prefix='/advisor')

CHAT_HISTORY_LIMIT = 20

@advisor_bp.route('/')
@login_required
def index():
    ledger = current_ledger()
    snapshot = build_snapshot(ledger)
    advice = current_advice(ledger, snapshot)
    return jsonify({
        "advice": advice.model_dump() if advice else None,
        "quest": ledger.get_quest(),
        "persona": ledger.get_persona(),
    })

@advisor_bp.route('/refresh', methods=['POST'])
@login_required
def refresh():
    bundle = refresh_advice(current_ledger(), current_app.advisor)
    if bundle is None:
        current_app.logger.info("Skipping advice refresh: no income or budget set")
    return redirect(url_for('advisor.index'))

@advisor_bp.route('/quest/accept', methods=['POST'])
@login_required
def quest_accept():
    if accept_quest(current_ledger()) is None:
        return jsonify({"error": "No quest on offer"}), 404
    return redirect(url_for('advisor.index'))

@advisor_bp.route('/chat')
@login_required
def chat_history():
    return jsonify({"history": session.get('chat_history', [])})

@advisor_bp.route('/chat', methods=['POST'])
@login_required
def chat():
    form = ChatForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400

    history = [ChatMessage.model_validate(m) for m in session.get('chat_history', [])]
    history.append(ChatMessage(role='user', text=form.message.data.strip()))

    snapshot = build_snapshot(current_ledger())
    reply = asyncio.run(current_app.advisor.chat(history, snapshot))
    history.append(ChatMessage(role='model', text=reply))

    session['chat_history'] = [m.model_dump() for m in history[-CHAT_HISTORY_LIMIT:]]
    return jsonify({"reply": reply, "history": session['chat_history']})

@advisor_bp.route('/chat/clear', methods=['POST'])
@login_required
def chat_clear():
    session.pop('chat_history', None)
    return redirect(url_for('advisor.chat_history'))

@advisor_bp.route('/category-suggestion', methods=['POST'])
@login_required
def category_suggestion():
    snapshot = build_snapshot(current_ledger())
    suggestion = asyncio.run(current_app.advisor.category_optimization(snapshot))
    if suggestion is None:
        return jsonify({"suggestion": None})
    return jsonify({
        "suggestion": {
            "limits": suggestion.as_mapping(),
            "rationale": suggestion.rationale,
        }
    })

@advisor_bp.route('/market-savings')
@login_required
def market_savings():
    snapshot = build_snapshot(current_ledger())
    tip = asyncio.run(current_app.advisor.market_savings(snapshot))
    return jsonify({"tip": tip.model_dump() if tip else None})
