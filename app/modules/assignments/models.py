# Supabase table: assignments
# A user invited to play one instrument for one worship set.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- set_id: uuid (foreign key to worship_sets.id, not null)
- instrument_id: uuid (foreign key to instruments.id, not null)
- user_id: uuid (foreign key to users.id, not null)
- status: text (invited | accepted | declined | withdrawn, default: invited)
- invited_at: timestamp (default: now())
- responded_at: timestamp (nullable)
- unique constraint on (set_id, instrument_id, user_id)
"""

from enum import Enum


class AssignmentStatus(str, Enum):
    INVITED = "invited"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    WITHDRAWN = "withdrawn"


# Transitions the assigned user may make when responding to an invitation
RESPONSE_TRANSITIONS = {
    AssignmentStatus.INVITED: {AssignmentStatus.ACCEPTED, AssignmentStatus.DECLINED},
}
