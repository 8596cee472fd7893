"""
Gunicorn configuration for the loyalty history service.

    gunicorn -c gunicorn.conf.py run:app
"""
import os

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"

# Each worker process gets its own connection pool
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
worker_class = 'sync'
timeout = 60
keepalive = 5

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
capture_output = True

proc_name = 'loyalty-history'

graceful_timeout = 30


def on_starting(server):
    print("[Gunicorn] Starting loyalty history server...")


def on_exit(server):
    print("[Gunicorn] Loyalty history server shutting down...")
