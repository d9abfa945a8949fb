"""
Flask application factory.

Creates and configures the app and registers the audit blueprint.
"""
from flask import Flask, request, session, jsonify


OPEN_PATHS = {'/health', '/login', '/logout'}


def create_app():
    """Create and configure the Flask application."""
    from spam_auditor.logging_config import configure_logging
    from spam_auditor.config import DASHBOARD_PASSWORD, SECRET_KEY

    app = Flask(__name__)

    configure_logging(app)

    app.secret_key = SECRET_KEY

    # ── Simple password auth ────────────────────────────────────────────
    @app.before_request
    def require_login():
        if not DASHBOARD_PASSWORD:
            return  # No password set: open access (local dev)
        if request.path in OPEN_PATHS:
            return
        if session.get('authenticated'):
            return
        return jsonify({'error': 'Authentication required'}), 401

    @app.route('/login', methods=['POST'])
    def login():
        password = request.form.get('password') or (request.get_json(silent=True) or {}).get('password')
        if DASHBOARD_PASSWORD and password == DASHBOARD_PASSWORD:
            session['authenticated'] = True
            return jsonify({'ok': True})
        return jsonify({'error': 'Wrong password'}), 401

    @app.route('/logout', methods=['POST'])
    def logout():
        session.clear()
        return jsonify({'ok': True})

    from spam_auditor.routes.audit import bp as audit_bp
    app.register_blueprint(audit_bp)

    # Import models so Base.metadata knows about them.
    # Schema is managed by Alembic, no create_all() call.
    import importlib
    importlib.import_module('spam_auditor.models.site')
    importlib.import_module('spam_auditor.models.audit_settings')

    return app
