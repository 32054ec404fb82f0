# Supabase table: meetups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

meetups:
- id: uuid (primary key)
- creator_id: uuid (foreign key to users.id, not null)
- title: text (not null)
- description: text (nullable)
- emoji: text (nullable)
- latitude: double precision (not null)
- longitude: double precision (not null)
- address: text (nullable)
- scheduled_for: timestamp (not null) - in the future when written
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- index on (scheduled_for)

Past meetups are kept but drop out of listings and the feed.
Shared circles live in event_circles with event_kind = 'meetup'.
"""
