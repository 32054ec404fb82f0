# Supabase tables: users, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- name: text (nullable) - display name
- username: text (unique, nullable) - handle, always stored lowercase
- avatar_url: text (nullable)
- phone_number: text (nullable) - synced from auth.users
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Rows are created when a user first signs in and are never hard-deleted here.
"""
