# Supabase table: event_circles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

event_circles:
- id: uuid (primary key)
- event_id: uuid (not null) - id of a row in pins or meetups, depending on event_kind
- event_kind: text (not null) - values: pin, meetup
- circle_id: uuid (foreign key to circles.id, not null, on delete cascade)
- created_at: timestamp (default: now())
- unique constraint on (event_id, event_kind, circle_id)

circle_id must reference a circle owned by the event's creator_id. The database
cannot express this across two tables, so EventService.validate_circle_ids
checks it before any event row is written.
"""
