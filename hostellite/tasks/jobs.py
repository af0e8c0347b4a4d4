from hostellite.tasks.celery_app import celery
from hostellite.tasks import worker_jobs

@celery.task(name="hostellite.tasks.jobs.reconcile_confirmations")
def reconcile_confirmations(limit: int = 50):
    return worker_jobs.reconcile_confirmations(limit=limit)
