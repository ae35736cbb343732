# Supabase table: suggestion_slots
# A time-boxed assignment letting one user propose songs for a worship set.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- set_id: uuid (foreign key to worship_sets.id, not null)
- assigned_user_id: uuid (foreign key to users.id, not null)
- min_songs: integer (>= 1)
- max_songs: integer (>= min_songs)
- due_at: timestamp (not null)
- status: text (pending | submitted | missed, default: pending)
- created_at: timestamp (default: now())
"""

from enum import Enum


class SlotStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    MISSED = "missed"
