# wsgi.py
"""
WSGI entry point, e.g. `gunicorn wsgi:application`.
"""

from config.config import Config
from app import create_app

application = create_app()

app = application

if __name__ == "__main__":
    app.run(host=Config.APP_HOST, port=Config.APP_PORT, debug=Config.DEBUG)
