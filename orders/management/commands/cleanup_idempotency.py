from django.core.management.base import BaseCommand
from django.utils import timezone
from orders.models import IdempotencyKey
from orders.services import purge_expired_idempotency_keys


class Command(BaseCommand):
    help = "Delete stored checkout responses whose idempotency window has passed"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report how many keys would be deleted")

    def handle(self, *args, **options):
        now = timezone.now()
        if options["dry_run"]:
            count = IdempotencyKey.objects.filter(expires_at__lt=now).count()
            self.stdout.write(f"{count} expired idempotency keys would be deleted.")
            return
        count = purge_expired_idempotency_keys(now=now)
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} expired idempotency keys."))
