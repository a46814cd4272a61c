from celery import Celery
from config import config

# NOTE: You must have a Celery broker running (e.g., Redis or RabbitMQ)
BROKER_URL = config.celery_broker_url
BACKEND_URL = config.celery_backend_url

celery_app = Celery(
    "conversion_tasks",
    broker=BROKER_URL,
    backend=BACKEND_URL,
    # This ensures the tasks are loaded when the worker starts
    include=["celery_tasks.conversion_tasks"]
)

celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,

    # Run tasks inline (tests, single-box deployments without a broker)
    task_always_eager=config.celery_task_always_eager,

    # === Producer-Side (Sending Message) Retry Settings ===
    # Conversions are fire-and-forget: a broker outage fails the publish
    # at once instead of holding the request that tracked the conversion.
    task_publish_retry=False,
    broker_connection_timeout=0.5,
)

celery_app.conf.task_routes = {
    # default queue
    'celery_tasks.conversion_tasks.*': {'queue': 'default'},
}
