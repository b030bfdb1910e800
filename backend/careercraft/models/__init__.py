from .admin import Admin
from .application import APPLICATION_STATUSES, Application
from .job import JOB_STATUSES, Job
from .notification import NOTIFICATION_STATUSES, EmailNotification
from .user import ACCOUNT_ROLES, User

__all__ = [
    "ACCOUNT_ROLES",
    "APPLICATION_STATUSES",
    "JOB_STATUSES",
    "NOTIFICATION_STATUSES",
    "Admin",
    "Application",
    "EmailNotification",
    "Job",
    "User",
]
