"""Interactive add, edit, delete and activation of user profiles."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional

from .profiles import UserProfile, UserProfileManager

Ask = Callable[[str, str, str], Optional[str]]
Notify = Callable[[str, str], None]

NEW_PROFILE = UserProfile(
    name="",
    basal_rate=1.0,
    carb_ratio=10.0,
    correction_factor=2.0,
    target_glucose=6.0,
)


@dataclass(frozen=True)
class _Field:
    attr: str
    label: str
    low: float
    high: float


_FIELDS = (
    _Field("basal_rate", "Basal Rate (U/hr):", 0, 100),
    _Field("carb_ratio", "Carb Ratio (g/U):", 0, 1000),
    _Field("correction_factor", "Correction Factor (mmol/L per U):", 0, 50),
    _Field("target_glucose", "Target BG (mmol/L):", 3, 30),
)


def console_ask(title: str, label: str, default: str) -> str | None:
    """Ask on the terminal; an empty answer keeps the default, EOF cancels."""
    try:
        answer = input(f"{title} - {label} [{default}] ")
    except EOFError:
        return None
    return answer.strip() or default


def _console_notify(title: str, text: str) -> None:
    print(f"{title}: {text}")


class ProfileEditor:
    """Edits the profiles held by a UserProfileManager through prompts."""

    def __init__(
        self,
        manager: UserProfileManager,
        ask: Ask | None = None,
        notify: Notify | None = None,
    ) -> None:
        self.manager = manager
        self.ask = ask if ask is not None else console_ask
        self.notify = notify if notify is not None else _console_notify

    def names(self) -> list[str]:
        """Names of the stored profiles in order."""
        return [p.name for p in self.manager.profiles]

    def _ask_number(self, title: str, field: _Field, default: float) -> float | None:
        while True:
            answer = self.ask(title, field.label, f"{default:.1f}")
            if answer is None:
                return None
            try:
                value = float(answer)
            except ValueError:
                continue
            if field.low <= value <= field.high:
                return round(value, 1)

    def prompt_profile(self, profile: UserProfile, title: str) -> UserProfile | None:
        """Ask for every field, starting from profile; None if cancelled."""
        name = self.ask(title, "Profile Name:", profile.name)
        if not name:
            return None
        values: dict[str, float] = {}
        for field in _FIELDS:
            value = self._ask_number(title, field, getattr(profile, field.attr))
            if value is None:
                return None
            values[field.attr] = value
        return replace(profile, name=name, **values)

    def add_profile(self) -> UserProfile | None:
        """Prompt for a new profile and store it; None if cancelled."""
        profile = self.prompt_profile(NEW_PROFILE, "Add Profile")
        if profile is not None:
            self.manager.add_profile(profile)
        return profile

    def _get(self, index: int) -> UserProfile | None:
        profiles = self.manager.profiles
        if 0 <= index < len(profiles):
            return profiles[index]
        return None

    def edit_profile(self, index: int) -> UserProfile | None:
        """Prompt to change the profile at index; None if absent or cancelled."""
        current = self._get(index)
        if current is None:
            return None
        edited = self.prompt_profile(current, "Edit Profile")
        if edited is not None:
            self.manager.update_profile(index, edited)
        return edited

    def delete_profile(self, index: int) -> bool:
        """Remove the profile at index; False if there is none."""
        if self._get(index) is None:
            return False
        return self.manager.delete_profile(index)

    def activate(self, index: int) -> UserProfile | None:
        """Make the profile at index active and announce it; None if absent."""
        profile = self._get(index)
        if profile is None:
            return None
        self.manager.load_profile(profile)
        self.notify("Profile Activated", f"Profile '{profile.name}' now active.")
        return profile