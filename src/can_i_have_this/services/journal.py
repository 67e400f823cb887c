"""Eating journal: entry creation, appends and by-day lookups."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

from can_i_have_this.domain.profile import JournalEntry, JournalStatus, UserProfile
from can_i_have_this.services.classification import classify, normalize_food_name

MILLISECONDS = 1000


def to_timestamp_ms(moment: datetime) -> int:
    """Convert a datetime to epoch milliseconds; naive values are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp() * MILLISECONDS)


def from_timestamp_ms(timestamp: int, tz: ZoneInfo) -> datetime:
    """Convert epoch milliseconds to an aware datetime in the given zone."""
    return datetime.fromtimestamp(timestamp / MILLISECONDS, tz=tz)


def new_entry(
    food_name: str,
    status: JournalStatus,
    notes: str = "",
    eaten_at: datetime | None = None,
) -> JournalEntry:
    """Create a journal entry with a fresh id, backdated to eaten_at if given."""
    moment = eaten_at or datetime.now(tz=UTC)
    return JournalEntry(
        id=uuid4().hex,
        timestamp=to_timestamp_ms(moment),
        food_name=normalize_food_name(food_name),
        notes=notes.strip(),
        status=status,
    )


def append(profile: UserProfile, entry: JournalEntry) -> UserProfile:
    """Prepend an entry and feed SAFE/UNSAFE outcomes into the food lists."""
    updated = profile.model_copy(update={"journal": [entry, *profile.journal]})
    if entry.status == JournalStatus.NEUTRAL:
        return updated
    return classify(updated, entry.food_name, entry.status == JournalStatus.SAFE)


def sorted_journal(journal: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Return entries most recent first."""
    return sorted(journal, key=lambda entry: entry.timestamp, reverse=True)


def entry_day(entry: JournalEntry, tz: ZoneInfo) -> date:
    """Return the local calendar day an entry falls on."""
    return from_timestamp_ms(entry.timestamp, tz).date()


def entries_on_day(
    journal: Iterable[JournalEntry], day: date, tz: ZoneInfo
) -> list[JournalEntry]:
    """Return entries on the given local calendar day, most recent first."""
    return sorted_journal(entry for entry in journal if entry_day(entry, tz) == day)


def has_entry_on_day(journal: Iterable[JournalEntry], day: date, tz: ZoneInfo) -> bool:
    """Return True when at least one entry falls on the given day."""
    return any(entry_day(entry, tz) == day for entry in journal)


@dataclass
class JournalDayIndex:
    """Journal entries bucketed by local calendar day.

    Built once per render so that calendar cells are answered with a dict
    lookup instead of a scan over the whole journal.
    """

    tz: ZoneInfo
    _by_day: dict[date, list[JournalEntry]] = field(default_factory=dict)

    @classmethod
    def build(cls, journal: Iterable[JournalEntry], tz: ZoneInfo) -> "JournalDayIndex":
        """Index a journal by the local day of each entry."""
        buckets: dict[date, list[JournalEntry]] = defaultdict(list)
        for entry in journal:
            buckets[entry_day(entry, tz)].append(entry)
        return cls(
            tz=tz,
            _by_day={day: sorted_journal(entries) for day, entries in buckets.items()},
        )

    def entries_on(self, day: date) -> list[JournalEntry]:
        """Return entries for a day, most recent first."""
        return list(self._by_day.get(day, []))

    def has_entries(self, day: date) -> bool:
        """Return True when the day has at least one entry."""
        return day in self._by_day

    def days_in_month(self, year: int, month: int) -> list[date]:
        """Return the populated days of a month in ascending order."""
        return sorted(
            day for day in self._by_day if day.year == year and day.month == month
        )
