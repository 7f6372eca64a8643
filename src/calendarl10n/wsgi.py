"""WSGI entrypoint for serving the translation API behind Passenger or gunicorn."""

from calendarl10n.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
