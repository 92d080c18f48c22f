from django.core.management.base import BaseCommand

from billing.services.enrollment_service import expire_overdue_enrollments


class Command(BaseCommand):
    help = "Mark ACTIVE enrollments whose end date has passed as EXPIRED"

    def handle(self, *args, **options):
        count = expire_overdue_enrollments()
        self.stdout.write(self.style.SUCCESS(f"Expired {count} enrollment(s)"))
