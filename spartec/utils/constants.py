"""Application-wide constants."""

APP_NAME = "Spartec Installatiebeheer API"
APP_VERSION = "1.0.0"

# Customer
CUSTOMER_TYPES = ["Particulier", "Zakelijk"]
CUSTOMER_STATUSES = ["Actief", "Inactief"]

# Work order lifecycle
WO_SCHEDULED = "Ingepland"
WO_IN_PROGRESS = "In uitvoering"
WO_COMPLETED = "Voltooid"
WO_CANCELLED = "Geannuleerd"
WORK_ORDER_STATUSES = [WO_SCHEDULED, WO_IN_PROGRESS, WO_COMPLETED, WO_CANCELLED]
WORK_ORDER_TERMINAL_STATUSES = [WO_COMPLETED, WO_CANCELLED]

# Invoices
INVOICE_CONCEPT = "Concept"
INVOICE_STATUSES = [INVOICE_CONCEPT, "Verzonden", "Betaald", "Te laat"]

# Projects
PROJECT_STATUSES = ["Gepland", "In uitvoering", "Voltooid", "Gepauzeerd"]

# User roles
USER_ROLES = ["monteur", "beheerder"]

# Dashboard month labels (nl)
MONTH_LABELS = ["Jan", "Feb", "Mrt", "Apr", "Mei", "Jun", "Jul", "Aug", "Sep", "Okt", "Nov", "Dec"]
