from functools import wraps
from flask import current_app, redirect, url_for
from core.ledger import LedgerStore

def current_ledger():
    return LedgerStore(current_app.storage, clock=current_app.clock)

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_ledger().get_user() is None:
            return redirect(url_for('auth.login'))
        return fn(*args, **kwargs)
    return wrapper
