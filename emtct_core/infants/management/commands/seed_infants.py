# emtct_core/infants/management/commands/seed_infants.py
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from emtct_core.infants import wiring
from emtct_core.infants.repository import InfantRepository
from emtct_core.infants.seed import demo_infants
from emtct_core.infants.store import DatabaseStore


class Command(BaseCommand):
    help = "Seed the infant register with demo infants spread across the mock facilities."

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=20, help="Number of demo infants (default 20).")
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Replace an existing register and clear its audit history (development only).",
        )

    def handle(self, *args, **options):
        count = options["count"]
        if count < 1:
            raise CommandError("--count must be at least 1")

        repo = InfantRepository(DatabaseStore(settings.EMTCT_STORE_KEY))
        if not repo.is_empty and not options["reset"]:
            self.stdout.write(
                self.style.WARNING(
                    f"Register already holds {len(repo.all_infants())} infants. Use --reset to replace it."
                )
            )
            return

        result = repo.replace_all(demo_infants(count))
        if not result.ok:
            raise CommandError(result.error.message)

        wiring.reset_repository()
        self.stdout.write(self.style.SUCCESS(f"Seeded {count} demo infants."))
