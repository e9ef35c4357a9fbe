import logging
import os
import sys
import traceback

from celery import Celery
from flask import Flask
from flask_sslify import SSLify
import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.flask import FlaskIntegration
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

__version__ = "0.1.0"

# Between INFO and WARNING: decisions worth seeing in the log, that aren't
# problems.
NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

log_level = os.environ.get("LOGLEVEL", "INFO").upper()
logger = logging.getLogger(__name__)
_stderr_handler = logging.StreamHandler(sys.stderr)
_stderr_handler.setLevel(log_level)
logger.addHandler(_stderr_handler)
logger.setLevel(log_level)

celery = Celery(strict_typing=False)


def expand_config(name=None):
    """The import path of a config class: "worker" -> "ci_webhooks.config.WorkerConfig"."""
    return f"ci_webhooks.config.{(name or 'default').capitalize()}Config"


def create_app(config=None):
    """
    The Flask app that receives webhooks.

    `config` names a class in ci_webhooks.config.  It defaults to the
    CI_WEBHOOKS_CONFIG environment variable, then to "default".
    """
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app)   # type: ignore[method-assign]
    config = config or os.environ.get("CI_WEBHOOKS_CONFIG")
    app.config.from_object(import_string(expand_config(config))())

    create_celery_app(app)
    if not app.debug:
        SSLify(app)

    from .github_views import github_bp
    from .tasks import tasks as tasks_bp
    app.register_blueprint(github_bp, url_prefix="/github")
    app.register_blueprint(tasks_bp, url_prefix="/tasks")
    return app


def create_celery_app(app=None, config="worker"):
    """
    Configure the Celery app from a Flask app.

    Tasks run inside the Flask app context.  When queued with a
    `wsgi_environ` keyword, they also run in a request context built from
    it, so that url_for and render_template work as they did in the view.
    """
    if os.environ.get("SENTRY_DSN"):
        sentry_sdk.init(integrations=[CeleryIntegration(), FlaskIntegration()])

    app = app or create_app(config=config)
    celery.main = app.import_name
    celery.conf.update(app.config)

    class FlaskContextTask(celery.Task): # type: ignore[name-defined]
        abstract = True

        def __call__(self, *args, **kwargs):
            wsgi_environ = kwargs.pop("wsgi_environ", None)
            try:
                with app.app_context():
                    if not wsgi_environ:
                        return self.run(*args, **kwargs)
                    with app.request_context(wsgi_environ):
                        return self.run(*args, **kwargs)
            except Exception:
                # The status endpoint shows the result; a traceback reads
                # better there than a pickled exception.
                return traceback.format_exc()

    celery.Task = FlaskContextTask
    return celery
