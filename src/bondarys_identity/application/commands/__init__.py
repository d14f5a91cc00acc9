"""Application commands for identity management."""

from bondarys_identity.application.commands.change_account_role_command import (
    ChangeAccountRoleCommand,
)
from bondarys_identity.application.commands.complete_onboarding_command import (
    CompleteOnboardingCommand,
)
from bondarys_identity.application.commands.update_profile_command import (
    UpdateProfileCommand,
)

__all__ = [
    "ChangeAccountRoleCommand",
    "CompleteOnboardingCommand",
    "UpdateProfileCommand",
]
