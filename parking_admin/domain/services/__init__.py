"""Domain services for the slot request admin tool.

Services in this package:
- SlotRequestController: search, pagination and approve/reject over the request list
- Notifier backends: where admin-facing messages go
"""

from parking_admin.domain.services.notification import (
    LoggingNotifier,
    MemoryNotifier,
    Notification,
    Notifier,
)
from parking_admin.domain.services.slot_requests import SlotRequestController

__all__ = [
    "SlotRequestController",
    "Notifier",
    "Notification",
    "LoggingNotifier",
    "MemoryNotifier",
]
