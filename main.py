"""WSGI entrypoint for the recipe API.

The Flask development server is intentionally not started from this module so
that containerized deployments rely on Gunicorn. Local development can still
use ``flask --app main run`` which imports the ``app`` object defined below.
"""

from recipes_api import create_app

app = create_app()


__all__ = ["app"]
