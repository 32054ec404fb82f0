"""
Seed Test Users Script
Creates three test accounts and a "Close Friends" circle in which the first
user has filed the second as a contact. The third user is left unconnected.
Safe to re-run: every write is an upsert.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from irlly.database.supabase_client import SupabaseClient
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TEST_USERS = [
    {"id": "00000000-0000-4000-8000-000000000001", "name": "Test User 1", "username": "testuser1"},
    {"id": "00000000-0000-4000-8000-000000000002", "name": "Test User 2", "username": "testuser2"},
    {"id": "00000000-0000-4000-8000-000000000003", "name": "Test User 3", "username": "testuser3"},
]

CLOSE_FRIENDS_CIRCLE_ID = "00000000-0000-4000-8000-0000000000c1"
CLOSE_FRIENDS_CONTACT_ID = "00000000-0000-4000-8000-0000000000a1"


def seed_users(supabase: Client) -> list:
    """Upsert the test users by id"""
    logger.info("Seeding test users...")
    result = supabase.table("users")\
        .upsert(TEST_USERS, on_conflict="id")\
        .execute()
    logger.info(f"Test users seeded: {len(result.data or [])}")
    return result.data or []


def seed_close_friends(supabase: Client):
    """User 1 files user 2 as a contact and puts them in a circle"""
    owner, friend = TEST_USERS[0], TEST_USERS[1]

    supabase.table("contacts").upsert({
        "id": CLOSE_FRIENDS_CONTACT_ID,
        "owner_id": owner["id"],
        "linked_user_id": friend["id"],
        "name": friend["name"],
        "username": friend["username"]
    }, on_conflict="id").execute()

    supabase.table("circles").upsert({
        "id": CLOSE_FRIENDS_CIRCLE_ID,
        "owner_id": owner["id"],
        "name": "Close Friends",
        "emoji": "🫶"
    }, on_conflict="id").execute()

    supabase.table("circle_members").upsert({
        "circle_id": CLOSE_FRIENDS_CIRCLE_ID,
        "contact_id": CLOSE_FRIENDS_CONTACT_ID
    }, on_conflict="circle_id,contact_id").execute()

    logger.info(f"Circle \"Close Friends\" seeded for {owner['username']} with {friend['username']}")


def main():
    """Main function to seed test data"""
    try:
        supabase = SupabaseClient.get_service_client()

        seed_users(supabase)
        seed_close_friends(supabase)

        logger.info("Seeding completed successfully!")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
