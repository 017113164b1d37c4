"""
Gunicorn configuration file for School Lab Booking production deployment.

Run with:
    gunicorn -c deploy/gunicorn.conf.py
"""

import multiprocessing
import os

# Application
wsgi_app = "school_lab.wsgi:application"
raw_env = [
    f"DJANGO_SETTINGS_MODULE={os.environ.get('DJANGO_SETTINGS_MODULE', 'school_lab.settings_production')}",
]

# Server socket
bind = f"127.0.0.1:{os.environ.get('GUNICORN_PORT', '8000')}"
backlog = 2048

# Worker processes
workers = int(os.environ.get('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
keepalive = 2

# Restart workers after this many requests, to prevent memory leaks
max_requests = 1000
max_requests_jitter = 100

# Worker timeouts
timeout = 30
graceful_timeout = 30

preload_app = True

# User and group to run workers as (if running as root)
user = os.environ.get('GUNICORN_USER', 'www-data')
group = os.environ.get('GUNICORN_GROUP', 'www-data')

# Logging
accesslog = os.environ.get('GUNICORN_ACCESS_LOG', '/var/log/school-lab-booking/gunicorn-access.log')
errorlog = os.environ.get('GUNICORN_ERROR_LOG', '/var/log/school-lab-booking/gunicorn-error.log')
loglevel = os.environ.get('GUNICORN_LOG_LEVEL', 'info')
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'school-lab-booking'

# Server mechanics
daemon = False
pidfile = os.environ.get('GUNICORN_PID_FILE', '/var/run/school-lab-booking/gunicorn.pid')
umask = 0o077

# Disable access log if behind reverse proxy
if os.environ.get('DISABLE_ACCESS_LOG', 'False').lower() == 'true':
    accesslog = None

# Development mode override
if os.environ.get('DJANGO_DEBUG', 'False').lower() == 'true':
    reload = True
    loglevel = 'debug'
    workers = 1


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("School Lab Booking server is ready. Server: %s", server.address)


def worker_int(worker):
    """Called just after a worker has been killed."""
    worker.log.info("Worker killed: %s", worker.pid)


def post_fork(server, worker):
    """Called just after a worker has been forked."""
    server.log.info("Worker spawned (pid: %s)", worker.pid)
