"""User insulin profiles and the manager that stores them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserProfile:
    """Insulin parameters for one user, in mmol/L and units."""

    name: str = ""
    basal_rate: float = 0.0  # U/hour
    carb_ratio: float = 0.0  # grams per unit
    correction_factor: float = 0.0  # mmol/L per unit
    target_glucose: float = 5.0  # mmol/L


DEFAULT_PROFILE = UserProfile(
    name="Default",
    basal_rate=1.0,
    carb_ratio=10.0,
    correction_factor=2.0,
    target_glucose=6.0,
)


class UserProfileManager:
    """Stores profiles and tracks which one is active."""

    def __init__(self) -> None:
        self._profiles: list[UserProfile] = [DEFAULT_PROFILE]
        self._active: UserProfile = DEFAULT_PROFILE

    def load_profile(self, profile: UserProfile) -> None:
        """Make the given profile the active one."""
        self._active = profile

    @property
    def active_profile(self) -> UserProfile:
        """The profile currently used for bolus calculations."""
        return self._active

    @property
    def profiles(self) -> tuple[UserProfile, ...]:
        """All stored profiles in order."""
        return tuple(self._profiles)

    def add_profile(self, profile: UserProfile) -> None:
        """Append a profile to the store."""
        self._profiles.append(profile)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._profiles)

    def update_profile(self, index: int, profile: UserProfile) -> bool:
        """Replace the profile at index; out-of-range indices are ignored."""
        if not self._in_range(index):
            return False
        self._profiles[index] = profile
        return True

    def delete_profile(self, index: int) -> bool:
        """Remove the profile at index; out-of-range indices are ignored."""
        if not self._in_range(index):
            return False
        del self._profiles[index]
        return True