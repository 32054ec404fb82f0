# Supabase table: pins
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

pins:
- id: uuid (primary key)
- creator_id: uuid (foreign key to users.id, not null)
- title: text (not null)
- note: text (nullable)
- emoji: text (nullable)
- latitude: double precision (not null)
- longitude: double precision (not null)
- address: text (nullable)
- is_active: boolean (not null, default: true) - false once the creator cancels it
- created_at: timestamp (default: now())
- expires_at: timestamp (not null) - created_at + PIN_TTL_HOURS
- updated_at: timestamp (nullable)
- index on (is_active, expires_at)

Shared circles live in event_circles with event_kind = 'pin'.
"""
