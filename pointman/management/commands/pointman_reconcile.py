"""Management command to check balances against the ledger."""

from django.core.management.base import BaseCommand, CommandError

from pointman.exceptions import PointmanError
from pointman.ledger import Ledger


class Command(BaseCommand):
    help = "Compare each account's points balance with the sum of its ledger entries"

    def add_arguments(self, parser):
        parser.add_argument(
            "--account",
            default=None,
            help="Only reconcile this account reference",
        )

    def handle(self, *args, **options):
        if options["account"]:
            try:
                results = [Ledger.reconcile(options["account"])]
            except PointmanError as exc:
                raise CommandError(exc.message)
        else:
            results = Ledger.reconcile_all()

        checked = 0
        mismatches = 0
        for result in results:
            checked += 1
            if not result.consistent:
                mismatches += 1
                self.stderr.write(
                    f"{result.account_ref}: balance {result.balance} != "
                    f"ledger {result.ledger_total} ({result.difference:+d})"
                )

        if mismatches:
            raise CommandError(f"{mismatches} of {checked} accounts out of balance.")

        self.stdout.write(self.style.SUCCESS(f"Checked {checked} accounts, all consistent."))
