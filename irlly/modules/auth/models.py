# Supabase Auth
# Identity is provided by Supabase Auth; this API never verifies credentials itself.

"""
Supabase Auth provides:
- phone one-time-code sign in (handled by the mobile app against Supabase directly)
- auth.get_user() - resolve a bearer JWT to the signed-in user

The auth user's id is the same uuid used as users.id, contacts.owner_id,
circles.owner_id, pins.creator_id, meetups.creator_id and rsvps.user_id.
"""
