from flask import Blueprint, jsonify, redirect, url_for, session
from auth_utils import current_ledger
from forms import RegisterForm

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

@auth_bp.route('/login')
def login():
    user = current_ledger().get_user()
    if user:
        return redirect(url_for('dashboard.index'))
    return jsonify({"registered": False, "message": "Pick a display name to get started."})


@auth_bp.route('/register', methods=['POST'])
def register():
    form = RegisterForm()
    if not form.validate_on_submit():
        return jsonify({"errors": form.errors}), 400

    user = current_ledger().register(form.username.data.strip())
    session['user_name'] = user.username
    return redirect(url_for('dashboard.index'))


@auth_bp.route('/logout')
def logout():
    current_ledger().logout()
    session.clear()
    return redirect(url_for('auth.login'))
