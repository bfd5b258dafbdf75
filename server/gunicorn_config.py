import multiprocessing
import os

# Server configuration (run from server/: gunicorn -c gunicorn_config.py main:app)
bind = f"{os.getenv('APP_HOST', '0.0.0.0')}:{os.getenv('APP_PORT', '8000')}"
workers = max(1, multiprocessing.cpu_count())
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 1000
max_requests_jitter = 100

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Timeouts
timeout = 120
graceful_timeout = 30

# Process naming
proc_name = "ridenow-api"

# Environment
env = {
    "PYTHONUNBUFFERED": "1",
}