import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for 'celery'
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'pet_connect.settings')

app = Celery('pet_connect')

# Load settings from Django config, using the CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "expire-trials-daily": {
        "task": "billing.tasks.expire_trials_task",
        "schedule": crontab(hour=0, minute=5),
    },
    "notify-ending-trials-daily": {
        "task": "billing.tasks.notify_ending_trials_task",
        "schedule": crontab(hour=9, minute=0),
    },
    "appointment-reminders-hourly": {
        "task": "appointments.tasks.send_appointment_reminders_task",
        "schedule": crontab(minute=0),
    },
}
