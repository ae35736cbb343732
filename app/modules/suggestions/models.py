# Supabase table: suggestions
# A song proposed for a worship set through a suggestion slot.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- slot_id: uuid (foreign key to suggestion_slots.id, not null)
- song_id: uuid (foreign key to songs.id, not null)
- notes: text (nullable)
- youtube_url_override: text (nullable)
- status: text (pending | approved, default: pending)
- created_at: timestamp (default: now())
- unique constraint on (slot_id, song_id)

Rejected suggestions are deleted, so there is no rejected status.
"""

from enum import Enum


class SuggestionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
