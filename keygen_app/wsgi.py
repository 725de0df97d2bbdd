# Entry point for WSGI hosts, e.g. ``gunicorn keygen_app.wsgi:app``.
from keygen_app.app import create_app

app = create_app()
