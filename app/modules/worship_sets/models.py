# Supabase table: worship_sets
# One per service; owns its suggestion slots, set songs and assignments.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- service_id: uuid (foreign key to services.id, unique, not null)
- status: text (draft | collecting | selecting | published | locked, default: draft)
- suggest_due_at: timestamp (nullable)
- notes: text (nullable)
- leader_user_id: uuid (foreign key to users.id, nullable) - the set leader
- created_at: timestamp (default: now())

Child rows are removed by the application in this order when a set is
deleted: suggestions -> suggestion_slots -> set_songs -> assignments.
"""

from enum import Enum


class SetStatus(str, Enum):
    DRAFT = "draft"
    COLLECTING = "collecting"
    SELECTING = "selecting"
    PUBLISHED = "published"
    LOCKED = "locked"
