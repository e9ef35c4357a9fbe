"""
Celery can't take a factory function as the application instance, so this
module makes the instance for it:

  $ celery -A ci_webhooks.worker worker
"""

from ci_webhooks import create_celery_app

application = create_celery_app(config="worker")
