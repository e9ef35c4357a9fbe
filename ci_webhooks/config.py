"""
Flask (and Celery) configuration classes, chosen with CI_WEBHOOKS_CONFIG.
"""

import os

_REDIS_URL = os.environ.get("REDIS_TLS_URL") or os.environ.get("REDIS_URL") or "redis://"


class DefaultConfig:
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "not-a-secret")
    GITHUB_WEBHOOKS_SECRET = os.environ.get("GITHUB_WEBHOOKS_SECRET")

    BROKER_URL = _REDIS_URL
    CELERY_RESULT_BACKEND = _REDIS_URL
    CELERY_ACCEPT_CONTENT = ["json"]
    CELERY_TASK_SERIALIZER = "json"
    CELERY_RESULT_SERIALIZER = "json"
    CELERY_EAGER_PROPAGATES = True

    def __init__(self):
        if self.BROKER_URL.startswith("rediss:"):
            # Hosted Redis presents a self-signed certificate.
            self.BROKER_URL += "?ssl_cert_reqs=none"
            self.CELERY_RESULT_BACKEND += "?ssl_cert_reqs=none"


class WorkerConfig(DefaultConfig):
    CELERY_IMPORTS = ("ci_webhooks.tasks.github",)


class DevelopmentConfig(DefaultConfig):
    DEBUG = True


class TestingConfig(DefaultConfig):
    TESTING = True
    GITHUB_WEBHOOKS_SECRET = "testing-webhooks-secret"
