import os

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
# Every worker starts its own coupon usage reset scheduler; the reset is
# idempotent, but keep a single worker unless the scheduler is disabled.
workers = int(os.getenv("WEB_CONCURRENCY", 1))
worker_class = "uvicorn.workers.UvicornWorker"
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", 30))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 5))

accesslog = "-"
errorlog = "-"
