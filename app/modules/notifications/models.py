# Supabase table: notification_logs
# Record of a message sent (or attempted) to a user.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- channel: text (email | sms)
- template_key: text (not null)
- payload_json: jsonb (nullable)
- sent_at: timestamp (default: now())
- status: text (not null)
"""

from enum import Enum


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
