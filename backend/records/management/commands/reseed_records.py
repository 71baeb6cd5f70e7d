from django.core.management.base import BaseCommand

from records.store import reset_store


class Command(BaseCommand):
    help = "Dev-only: drop every record in the in-memory store and load the seed data again."

    def add_arguments(self, parser):
        parser.add_argument("--empty", action="store_true", help="Leave the store empty instead of seeding it.")

    def handle(self, *args, **options):
        store = reset_store(seed=not options["empty"])
        counts = {
            "quotations": len(store.quotations),
            "bookings": len(store.bookings),
            "buy rates": len(store.buy_rates),
            "schedules": len(store.schedules),
            "schedule rates": len(store.schedule_rates),
            "ports": len(store.ports),
        }
        for name, count in counts.items():
            self.stdout.write(f"{name}: {count}")
        self.stdout.write(self.style.SUCCESS("Record store reset."))
