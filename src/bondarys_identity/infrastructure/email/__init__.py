from bondarys_identity.infrastructure.email.email_notifier import (
    TEMPLATES,
    EmailNotifier,
)

__all__ = [
    "TEMPLATES",
    "EmailNotifier",
]
