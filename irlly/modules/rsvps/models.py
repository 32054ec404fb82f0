# Supabase table: rsvps
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

rsvps:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- event_id: uuid (not null) - id of a row in pins or meetups, depending on event_kind
- event_kind: text (not null) - values: pin, meetup
- response: text (not null) - values: attending, not_attending
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (user_id, event_id, event_kind)

Writes go through a single upsert with on_conflict on the unique key, so two
concurrent taps from the same user leave exactly one row.
"""
