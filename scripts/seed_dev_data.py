#!/usr/bin/env python3
"""Seed a development database with festival users and events.

Usage:
    python scripts/seed_dev_data.py

Uses HABBA_DATABASE_URL (or the default from settings). Tables are created if
missing; existing rows are left alone.
"""

import asyncio

from sqlalchemy import text

from app.core.database import engine, get_session_context, init_db

USERS = [
    ("ay-101", "Asha Rao", "asha@acharya.test", "faculty", "CSE"),
    ("ay-303", "Ravi Kumar", "ravi@acharya.test", "Acharya Institute of Technology", "ECE"),
    ("ay-404", "Meera Nair", "meera@acharya.test", "Acharya Institute of Technology", "MBA"),
    ("bd-202", "Kiran Shetty", "kiran@bdt.test", "BDT College", "MECH"),
]

EVENTS = [
    ("13", "Faculty Cricket", "Main ground", 0),
    ("14", "Inter-department Football", "Main ground", 100),
    ("50", "Battle of Bands", "Open air theatre", 300),
    ("51", "Hackathon", "Block A labs", 200),
]


async def seed():
    await init_db()

    async with get_session_context() as session:
        for user_id, name, email, college, dept in USERS:
            await session.execute(text("""
                INSERT INTO users (user_id, name, email, college_name, department_name)
                VALUES (:user_id, :name, :email, :college, :dept)
                ON CONFLICT (user_id) DO NOTHING
            """), {"user_id": user_id, "name": name, "email": email, "college": college, "dept": dept})

        for event_id, name, venue, fee in EVENTS:
            await session.execute(text("""
                INSERT INTO events (event_id, name, venue, fee)
                VALUES (:event_id, :name, :venue, :fee)
                ON CONFLICT (event_id) DO NOTHING
            """), {"event_id": event_id, "name": name, "venue": venue, "fee": fee})

    await engine.dispose()
    print(f"Seeded {len(USERS)} users and {len(EVENTS)} events.")


if __name__ == "__main__":
    asyncio.run(seed())
