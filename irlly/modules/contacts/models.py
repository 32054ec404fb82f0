# Supabase table: contacts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

contacts:
- id: uuid (primary key)
- owner_id: uuid (foreign key to users.id, not null) - the user whose address book this is
- linked_user_id: uuid (foreign key to users.id, nullable) - set when the contact is a registered user
- name: text (not null)
- username: text (nullable) - handle as the owner typed it, lowercase
- phone_number: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- index on (linked_user_id) - the reverse lookup used for circle membership

Contacts are directed: A holding a contact for B says nothing about B's
contacts. Only owner_id reads or writes its rows.
"""
