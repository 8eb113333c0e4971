"""
WSGI / Flask CLI entry point.

Usage:
    flask --app wsgi run
    flask --app wsgi import-roi roi_metrics.csv
    gunicorn wsgi:app
"""

from systems_hub import create_app

app = create_app()
