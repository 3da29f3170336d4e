from django.apps import AppConfig


class BillingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.billing"
    label = "billing"

    def ready(self) -> None:
        from modules.billing.events import InvoiceGenerated, InvoicePaid, InvoiceStatusChanged
        from modules.billing.handlers import (
            invoice_generated_handler,
            invoice_paid_handler,
            invoice_status_changed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(InvoiceGenerated, invoice_generated_handler)
        event_bus.subscribe(InvoicePaid, invoice_paid_handler)
        event_bus.subscribe(InvoiceStatusChanged, invoice_status_changed_handler)
