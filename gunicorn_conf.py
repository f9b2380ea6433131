"""
Gunicorn configuration for production FastAPI deployment.

Gunicorn is the process manager, with Uvicorn workers for ASGI.

Decision: One worker by default. Verification codes live in process memory,
so with several workers a code issued by one worker is unknown to the others
and verification fails whenever the verify request lands elsewhere. Scale
with more instances behind sticky routing, not more workers.
"""

import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.getenv("GUNICORN_WORKERS", "1"))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000

# Timeouts
timeout = 30  # Workers silent for >30s are killed
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"  # stdout (Docker-friendly)
errorlog = "-"  # stderr (Docker-friendly)
loglevel = os.getenv("LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "email-verification-api"

# Server mechanics
daemon = False  # Run in foreground (required for Docker)
pidfile = None

# SSL (disabled, handled by reverse proxy)
keyfile = None
certfile = None
