#!/usr/bin/env python3
"""
Seed Sample Data

Inserts two teams with regions, three reviewers and a few Pending events so
the batch/review/requeue flow can be exercised locally.

Usage:
    python scripts/seed_sample_data.py
    python scripts/seed_sample_data.py --events-per-region 5
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from review_dispatch.db.client import close_db_pool, get_db_pool
from review_dispatch.kernel.logging import configure_logging

logger = structlog.get_logger()

TEAMS = [
    ("Team Alpha", "Handles US and CA events", 10, ["us-east-1", "ca-central-1"]),
    ("Team Beta", "Handles EU events", 5, ["eu-west-1", "eu-central-1"]),
]

USERS = [
    ("alice_a", "alice@example.com", "Team Alpha", "Alice Alpha"),
    ("bob_b", "bob@example.com", "Team Beta", "Bob Beta"),
    ("charlie_a", "charlie@example.com", "Team Alpha", "Charlie Alpha"),
]


async def seed(events_per_region: int) -> None:
    pool = await get_db_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            team_ids: dict[str, str] = {}
            for name, description, batch_size, regions in TEAMS:
                team_id = await conn.fetchval(
                    """
                    INSERT INTO teams (team_name, description, batch_size)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (team_name) DO UPDATE SET batch_size = EXCLUDED.batch_size
                    RETURNING team_id::text
                    """,
                    name,
                    description,
                    batch_size,
                )
                team_ids[name] = team_id
                for region in regions:
                    await conn.execute(
                        """
                        INSERT INTO team_regions (team_id, region_code)
                        VALUES ($1::uuid, $2)
                        ON CONFLICT DO NOTHING
                        """,
                        team_id,
                        region,
                    )
                logger.info("Seeded team", team=name, team_id=team_id, regions=regions)

            for username, email, team_name, display_name in USERS:
                user_id = await conn.fetchval(
                    """
                    INSERT INTO users (username, email, team_id, display_name)
                    VALUES ($1, $2, $3::uuid, $4)
                    ON CONFLICT (username) DO UPDATE SET team_id = EXCLUDED.team_id
                    RETURNING user_id::text
                    """,
                    username,
                    email,
                    team_ids[team_name],
                    display_name,
                )
                logger.info("Seeded user", username=username, user_id=user_id, team=team_name)

            inserted = 0
            for _, _, _, regions in TEAMS:
                for region in regions:
                    for index in range(events_per_region):
                        await conn.execute(
                            """
                            INSERT INTO events (region_code, external_event_id, event_payload, status)
                            VALUES ($1, $2, $3, 'Pending')
                            """,
                            region,
                            f"ext-{region}-{index:03d}",
                            {"type": "test", "sequence": index},
                        )
                        inserted += 1
            logger.info("Seeded pending events", count=inserted)


async def main() -> int:
    parser = argparse.ArgumentParser(description="Seed sample teams, users and events")
    parser.add_argument("--events-per-region", type=int, default=2)
    args = parser.parse_args()

    configure_logging()
    try:
        await seed(max(0, args.events_per_region))
    except Exception as exc:
        logger.error("Database seeding failed", error=str(exc))
        return 1
    finally:
        await close_db_pool()
    logger.info("Database seeding completed")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
