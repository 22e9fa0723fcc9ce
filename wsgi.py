"""
WSGI entry point.

Usage:
    flask --app wsgi run
"""

from venue_desk import create_app

app = create_app()
