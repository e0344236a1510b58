from invoicing.services.invoice_service import InvoiceService
