from models.base import ANY_NAME, MISSING_NAME, CatalogEntry, lookup_name
from models.center import Center
from models.subject import Subject
from models.standard import Standard
from models.rate_rule import RateRule
from models.session import Session, SessionStatus
from models.settings import Settings
from models.billing_state import BillingState

__all__ = [
    "ANY_NAME",
    "MISSING_NAME",
    "CatalogEntry",
    "lookup_name",
    "Center",
    "Subject",
    "Standard",
    "RateRule",
    "Session",
    "SessionStatus",
    "Settings",
    "BillingState",
]
