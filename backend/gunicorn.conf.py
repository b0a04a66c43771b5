import multiprocessing

bind = "0.0.0.0:8000"
wsgi_app = "dialectbase.main:app"
workers = multiprocessing.cpu_count()
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 1000
max_requests_jitter = 50
timeout = 30
keepalive = 5
accesslog = "-"
errorlog = "-"
loglevel = "info"
