# Supabase tables: circles, circle_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

circles:
- id: uuid (primary key)
- owner_id: uuid (foreign key to users.id, not null)
- name: text (not null)
- emoji: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

circle_members:
- id: uuid (primary key)
- circle_id: uuid (foreign key to circles.id, not null, on delete cascade)
- contact_id: uuid (foreign key to contacts.id, not null, on delete cascade)
- created_at: timestamp (default: now())
- unique constraint on (circle_id, contact_id)
- index on (contact_id) - the reverse lookup used for circle membership

Members are contacts, not users. A contact may only be placed in a circle
owned by the same user that owns the contact; CircleService checks this
before writing.
"""
