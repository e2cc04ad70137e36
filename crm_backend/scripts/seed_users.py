"""
CRM - Seed development users (dev/staging only)
Creates one admin, one manager and two agents with a shared password.
Run: python -m crm_backend.scripts.seed_users
Reset: python -m crm_backend.scripts.seed_users --reset
"""

import asyncio
import sys

from crm_backend.config import client, db, new_id, now_iso, hash_password, normalize_email

# Same password for all seeded accounts
DEV_PASSWORD = "CrmDev2026!"

SEED_USERS = [
    {"email": "admin@crm.local",   "firstName": "Admin",   "lastName": "User",  "role": "admin"},
    {"email": "manager@crm.local", "firstName": "Maya",    "lastName": "Stone", "role": "manager"},
    {"email": "agent1@crm.local",  "firstName": "Alex",    "lastName": "Reed",  "role": "agent"},
    {"email": "agent2@crm.local",  "firstName": "Sam",     "lastName": "Hart",  "role": "agent"},
]


async def reset(db):
    """Delete all crm.local users"""
    result = await db.users.delete_many({"email": {"$regex": "@crm\\.local$"}})
    print(f"Deleted {result.deleted_count} seeded users")


async def seed(db):
    """Create/update seeded users"""
    password = await hash_password(DEV_PASSWORD)
    for u in SEED_USERS:
        email = normalize_email(u["email"])
        existing = await db.users.find_one({"email": email})
        doc = {
            "email": email,
            "password": password,
            "firstName": u["firstName"],
            "lastName": u["lastName"],
            "name": f"{u['firstName']} {u['lastName']}",
            "role": u["role"],
            "status": "active",
        }
        if existing:
            await db.users.update_one({"email": email}, {"$set": doc})
            print(f"  Updated: {email} ({u['role']})")
        else:
            doc["id"] = new_id()
            doc["createdAt"] = now_iso()
            await db.users.insert_one(doc)
            print(f"  Created: {email} ({u['role']})")


async def main(argv):
    if "--reset" in argv:
        await reset(db)
        print("Reset complete. Run without --reset to re-seed.")
    else:
        await reset(db)
        await seed(db)
        print(f"\n{len(SEED_USERS)} users seeded. Password for all: {DEV_PASSWORD}")
        print("Reset: python -m crm_backend.scripts.seed_users --reset")

    client.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
