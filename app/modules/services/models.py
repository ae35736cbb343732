# Supabase table: services
# A dated occurrence of a service type; owns exactly one worship set.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- service_type_id: uuid (foreign key to service_types.id, not null)
- service_date: timestamp (not null)
- leader_id: uuid (foreign key to users.id, nullable)
- status: text (planned | published | cancelled, default: planned)
- created_at: timestamp (default: now())
- unique constraint on (service_type_id, service_date)
"""

from enum import Enum


class ServiceStatus(str, Enum):
    PLANNED = "planned"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
