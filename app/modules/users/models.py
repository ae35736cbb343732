# Supabase table: users
# Profiles for Supabase Auth users; roles drive every authorization decision.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, references auth.users.id)
- email: text (unique, not null)
- name: text (not null)
- phone_e164: text (nullable)
- roles: text[] (subset of admin / leader / musician, default {musician})
- is_active: boolean (default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    LEADER = "leader"
    MUSICIAN = "musician"
