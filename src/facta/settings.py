"""User settings, onboarding and reminder scheduling decisions."""
import logging
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

REMINDER_HOUR = 9
REMINDER_MINUTE = 0
DEFAULT_DISPLAY_NAME = "Guest"
THEMES = ("system", "light", "dark", "mint", "ocean", "sunset")
AVATARS = ("initials", "emoji", "system_icon")

DAILY_REMINDER = "daily-reminder"
QUIZ_REMINDER = "quiz-reminder"


class StoreScheduler:
    """Reminder scheduler that keeps the pending reminders in the progress store."""

    def __init__(self, store):
        self.store = store

    def _set(self, name: str, when: datetime | None) -> None:
        reminders = self.store.load_reminders()
        if when is None:
            reminders.pop(name, None)
            logger.info("Cancelled %s", name)
        else:
            reminders[name] = when.isoformat()
            logger.info("Scheduled %s for %s", name, when.strftime("%Y-%m-%d %H:%M"))
        self.store.save_reminders(reminders)

    def schedule_daily_reminder(self, when: datetime) -> None:
        self._set(DAILY_REMINDER, when)

    def cancel_daily_reminder(self) -> None:
        self._set(DAILY_REMINDER, None)

    def schedule_quiz_reminder(self, when: datetime) -> None:
        self._set(QUIZ_REMINDER, when)

    def cancel_quiz_reminder(self) -> None:
        self._set(QUIZ_REMINDER, None)


def next_reminder_time(now: datetime, hour: int = REMINDER_HOUR, minute: int = REMINDER_MINUTE) -> datetime:
    """The next time strictly after ``now`` that the clock shows hour:minute."""
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def finish_onboarding(store, scheduler, notifications_granted: bool, daily_fact_enabled: bool,
                      now: datetime | None = None) -> datetime | None:
    """Mark onboarding done; schedule the daily reminder if allowed. Returns its time."""
    settings = store.load_user_settings()
    settings.daily_fact_notifications = daily_fact_enabled
    store.save_user_settings(settings)
    store.set_onboarding_complete(True)
    if notifications_granted and daily_fact_enabled:
        when = next_reminder_time(now or datetime.now())
        scheduler.schedule_daily_reminder(when)
        return when
    return None


def toggle_daily_fact(store, scheduler, enabled: bool, now: datetime | None = None) -> None:
    settings = store.load_user_settings()
    settings.daily_fact_notifications = enabled
    store.save_user_settings(settings)
    if enabled:
        scheduler.schedule_daily_reminder(next_reminder_time(now or datetime.now()))
    else:
        scheduler.cancel_daily_reminder()


def toggle_quiz_reminders(store, scheduler, enabled: bool, now: datetime | None = None) -> None:
    settings = store.load_user_settings()
    settings.quiz_reminders = enabled
    store.save_user_settings(settings)
    if enabled:
        scheduler.schedule_quiz_reminder(next_reminder_time(now or datetime.now()))
    else:
        scheduler.cancel_quiz_reminder()


def set_display_name(store, name: str) -> str:
    settings = store.load_user_settings()
    settings.display_name = name.strip() or DEFAULT_DISPLAY_NAME
    store.save_user_settings(settings)
    return settings.display_name


def set_theme(store, theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme}")
    settings = store.load_user_settings()
    settings.theme = theme
    store.save_user_settings(settings)


def set_avatar(store, avatar: str) -> None:
    if avatar not in AVATARS:
        raise ValueError(f"Unknown avatar: {avatar}")
    settings = store.load_user_settings()
    settings.avatar = avatar
    store.save_user_settings(settings)
