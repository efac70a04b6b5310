"""Gunicorn configuration for serving the zakat engine API."""
import os

# Server socket
bind = os.environ.get('ZAKAT_BIND', '0.0.0.0:8080')

# Worker processes; each worker opens its own SQLite connection per request
workers = int(os.environ.get('ZAKAT_WORKERS', '2'))
worker_class = 'sync'
timeout = 30
keepalive = 2

# Logging
accesslog = '-'
errorlog = '-'
loglevel = os.environ.get('ZAKAT_LOG_LEVEL', 'info').lower()

# Process naming
proc_name = 'zakat-engine'

wsgi_app = 'zakat_engine:create_app()'
