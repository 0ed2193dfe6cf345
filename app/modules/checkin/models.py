from app.core.db import StoredRecord
from app.modules.checkin.schemas import CheckinPlan


class CheckinRecord(StoredRecord):
    """Daily check-in plan as shown to the user."""

    plan: CheckinPlan

    class Settings:
        name = "check_ins"
