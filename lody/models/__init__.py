# Import all models here for Alembic
from lody.models.waitlist_entry import WaitlistEntry

__all__ = [
    "WaitlistEntry",
]
