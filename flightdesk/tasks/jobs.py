from flightdesk.tasks.celery_app import celery
from flightdesk.tasks import worker_jobs


@celery.task(name="flightdesk.tasks.jobs.process_email_queue")
def process_email_queue(limit: int = 50):
    return worker_jobs.process_email_queue(limit=limit)
