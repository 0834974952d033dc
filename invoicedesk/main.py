from invoicedesk.auth.client import SupabaseAuthClient
from invoicedesk.config.settings import Settings
from invoicedesk.database.connection import close_pool, init_pool
from invoicedesk.database.realtime import ChangeListener
from invoicedesk.database.repositories.invoice_repository import InvoiceRepository
from invoicedesk.extraction.factory import ExtractorFactory
from invoicedesk.logging.logger import Log
from invoicedesk.reporting.dashboard import draft_count
from invoicedesk.session.controller import SessionController


def build_controller(settings: Settings) -> SessionController:
    """Build a SessionController with all required adapters."""
    auth = None
    if settings.multi_tenant or settings.supabase_url:
        auth = SupabaseAuthClient(settings)
    return SessionController(
        repository=InvoiceRepository(),
        extractor=ExtractorFactory.create(settings),
        settings=settings,
        auth=auth,
    )


def main() -> None:
    """Entry point: initialize pool -> load invoices -> follow store changes."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        controller = build_controller(settings)
        records = controller.refresh()
        Log.info(f"{len(records)} invoice(s) in store, {draft_count(records)} awaiting review")
        listener = ChangeListener(settings, controller.handle_change)
        listener.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
