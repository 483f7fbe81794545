"""User profile lifecycle."""

from dataclasses import dataclass, replace
from uuid import UUID

from fitpal.domain.profile import UserProfile
from fitpal.domain.storage import StoreOutcome
from fitpal.services.nutrition import apply_targets
from fitpal.services.storage import TwoTierLogRepository, combine_outcomes

_DERIVED_FIELDS = {"daily_calories", "daily_macros"}


@dataclass
class ProfileService:
    """Application service for onboarding and profile edits."""

    repository: TwoTierLogRepository

    def get_profile(self, user_id: UUID | None) -> StoreOutcome[UserProfile | None]:
        """Return the stored profile, if any."""
        return self.repository.get_profile(user_id)

    def complete_onboarding(
        self, user_id: UUID | None, profile: UserProfile
    ) -> StoreOutcome[UserProfile]:
        """Compute targets for a new profile, mark onboarding done and save it."""
        completed = apply_targets(replace(profile, onboarding_complete=True))
        saved = self.repository.save_profile(user_id, completed)
        return combine_outcomes(completed, [saved])

    def update_profile(
        self, user_id: UUID | None, profile: UserProfile, **changes: object
    ) -> StoreOutcome[UserProfile]:
        """Apply attribute changes, recompute targets and save."""
        derived = _DERIVED_FIELDS.intersection(changes)
        if derived:
            raise ValueError(
                f"Derived targets cannot be set directly: {sorted(derived)}"
            )
        updated = apply_targets(replace(profile, **changes))
        saved = self.repository.save_profile(user_id, updated)
        return combine_outcomes(updated, [saved])
