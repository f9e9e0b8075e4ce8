"""Management command to rebuild customer lifetime values."""

from django.core.management.base import BaseCommand

from tallyman.services.lifetime import recalculate_all


class Command(BaseCommand):
    help = "Recompute Customer.lifetime from paid orders and persist changed values"

    def add_arguments(self, parser):
        parser.add_argument(
            "--customer",
            action="append",
            dest="codes",
            default=None,
            help="Customer code to recalculate (repeatable; default: all active)",
        )

    def handle(self, *args, **options):
        updated = recalculate_all(codes=options["codes"])
        self.stdout.write(
            self.style.SUCCESS(f"Updated lifetime of {updated} customers.")
        )
