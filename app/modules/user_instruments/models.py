# Supabase table: user_instruments
# The instruments each user plays; leaders use it when filling assignments.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (references users.id)
- instrument_id: uuid (references instruments.id)
- is_primary: boolean (default: false, at most one true per user)
- proficiency_level: integer (nullable, 1 to 5)
- created_at: timestamp (default: now())
- unique (user_id, instrument_id)
"""

MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5
