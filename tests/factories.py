"""Row builders for arranging test data directly in the fake store."""

from datetime import datetime, timedelta, timezone

from tests.fakes import FakeSupabase


def iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat()


def days_from_now(days: int) -> str:
    return iso(datetime.now(timezone.utc) + timedelta(days=days))


def make_song(db: FakeSupabase, title: str = "Amazing Grace", familiarity: int = 80, **extra) -> dict:
    return db.add("songs", title=title, familiarity_score=familiarity, **extra)


def make_version(db: FakeSupabase, song: dict, name: str = "Original", **extra) -> dict:
    return db.add("song_versions", song_id=song["id"], name=name, **extra)


def make_service_type(db: FakeSupabase, name: str = "Sunday", start: str = "10:00") -> dict:
    return db.add("service_types", name=name, default_start_time=start)


def make_service(db: FakeSupabase, service_type: dict, when: str = None, **set_fields) -> tuple:
    """A service and its worship set; returns (service, worship_set)."""
    service = db.add("services", service_type_id=service_type["id"], service_date=when or days_from_now(7))
    worship_set = db.add("worship_sets", service_id=service["id"], **set_fields)
    return service, worship_set


def make_instrument(db: FakeSupabase, code: str = "drums", display_name: str = "Drums", max_per_set: int = 1) -> dict:
    return db.add("instruments", code=code, display_name=display_name, max_per_set=max_per_set)


def make_slot(db: FakeSupabase, worship_set: dict, user_id: str, min_songs: int = 1, max_songs: int = 2,
              due_at: str = None, **extra) -> dict:
    return db.add(
        "suggestion_slots",
        set_id=worship_set["id"],
        assigned_user_id=user_id,
        min_songs=min_songs,
        max_songs=max_songs,
        due_at=due_at or days_from_now(3),
        **extra,
    )


def make_set_song(db: FakeSupabase, worship_set: dict, version: dict, position: int, is_new: bool = False) -> dict:
    return db.add("set_songs", set_id=worship_set["id"], song_version_id=version["id"], position=position, is_new=is_new)
