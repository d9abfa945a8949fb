"""
WSGI entry point for the audit API: `gunicorn wsgi:app`.

Scans queued with `POST /api/scan?async=1` and the daily scan run in a
separate `rq worker --with-scheduler` process.
"""
from spam_auditor import create_app

app = create_app()

if __name__ == '__main__':
    import os
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 8080)))
