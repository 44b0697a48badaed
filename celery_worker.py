"""Celery worker entry point for background notification delivery.

Usage: celery -A celery_worker.celery_app worker --loglevel=info
"""
import sys
import logging

# Configure logging BEFORE importing Celery so worker logs go to stdout
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True
)

from borrowing_service.infrastructure.celery_app import celery_app  # noqa: E402

if __name__ == "__main__":
    celery_app.start()
