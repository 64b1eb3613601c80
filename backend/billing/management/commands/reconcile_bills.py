from django.core.management.base import BaseCommand

from billing.services import BillingService


class Command(BaseCommand):
    help = "Re-apply table release and stock depletion for paid bills whose settlement side effects failed"

    def handle(self, *args, **options):
        pending = list(BillingService.bills_needing_reconciliation().values_list("pk", flat=True))
        if not pending:
            self.stdout.write(self.style.SUCCESS("No bills need reconciliation."))
            return

        failed = 0
        for bill_id in pending:
            result = BillingService.reconcile_bill(bill_id)
            if result.reconciled:
                self.stdout.write(f"Reconciled bill {bill_id} ({len(result.skipped)} line(s) skipped)")
            else:
                failed += 1
                self.stdout.write(self.style.WARNING(f"Bill {bill_id} still failing"))

        self.stdout.write(
            self.style.SUCCESS(f"Processed {len(pending)} bill(s); {failed} still need attention.")
        )
