from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from billing.subscriptions import expire_subscriptions, expire_trials, notify_ending_trials


class Command(BaseCommand):
    help = "Expire ended trials and subscriptions, and warn companies whose trial ends soon."

    def add_arguments(self, parser):
        parser.add_argument(
            "--notice-days",
            type=int,
            default=settings.TRIAL_ENDING_NOTICE_DAYS,
            help="Warn about trials ending within this many days.",
        )
        parser.add_argument(
            "--no-notify",
            action="store_true",
            help="Only expire; do not send trial ending notices.",
        )

    def handle(self, *args, **options):
        now = timezone.now()
        self.stdout.write(self.style.MIGRATE_HEADING(f"Running subscription check at {now:%Y-%m-%d %H:%M}"))

        expired = expire_trials(now)
        lapsed = expire_subscriptions(now)
        notified = [] if options["no_notify"] else notify_ending_trials(options["notice_days"], now)

        self.stdout.write(self.style.SUCCESS(
            f"Trials expired: {len(expired)}\n"
            f"Subscriptions lapsed: {lapsed}\n"
            f"Trial ending notices: {len(notified)}"
        ))
