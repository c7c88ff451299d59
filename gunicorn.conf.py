"""
Gunicorn configuration for the CritiqueLab API.

Env vars that override defaults:
  PORT     — TCP port to bind
  WORKERS  — number of worker processes (default: 2)

The per-IP rate limiter is in-memory, so each worker keeps its own
counters: the effective limit is RATE_LIMIT_MAX_REQUESTS × WORKERS.
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# AI gateway calls can take a while; keep this above AI_GATEWAY_TIMEOUT_SECONDS.
timeout = 120

loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
