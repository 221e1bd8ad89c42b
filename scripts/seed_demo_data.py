#!/usr/bin/env python3
# =============================================================================
# scripts/seed_demo_data.py - Demo Data Seeder
# =============================================================================
# Fills an empty database with two trainers, four owners and their pets,
# tasks, submissions and trainer comments, then backfills workspaces.
#
# Skips everything when the users table already has rows.
#
# Usage:
#   python scripts/seed_demo_data.py
# =============================================================================

import logging
import os
import sys
from datetime import timedelta

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from core.models.submission import SubmissionStatus
from core.models.user import UserRole
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now
from scripts.migrate_workspaces import migrate_workspaces

logger = logging.getLogger(__name__)


# =============================================================================
# Demo Data
# =============================================================================

# key: (email, first_name, last_name, role)
USERS = {
    "sarah": ("sarah.trainer@pawsync.demo", "Sarah", "Johnson", UserRole.TRAINER),
    "mike": ("mike.trainer@pawsync.demo", "Mike", "Chen", UserRole.TRAINER),
    "emily": ("emily.owner@pawsync.demo", "Emily", "Parker", UserRole.OWNER),
    "james": ("james.owner@pawsync.demo", "James", "Wilson", UserRole.OWNER),
    "lisa": ("lisa.owner@pawsync.demo", "Lisa", "Martinez", UserRole.OWNER),
    "david": ("david.owner@pawsync.demo", "David", "Thompson", UserRole.OWNER),
}

# key: (name, species, owner, trainer)
PETS = {
    "buddy": ("Buddy", "Golden Retriever", "emily", "sarah"),
    "luna": ("Luna", "Siamese Cat", "emily", None),
    "max": ("Max", "German Shepherd", "james", "mike"),
    "bella": ("Bella", "Labrador Retriever", "james", "sarah"),
    "charlie": ("Charlie", "Beagle", "lisa", "sarah"),
    "daisy": ("Daisy", "Poodle", "lisa", "mike"),
    "rocky": ("Rocky", "Boxer", "david", "sarah"),
    "milo": ("Milo", "French Bulldog", "david", "mike"),
}

# key: (pet, title, instructions, frequency, expected_duration_mins)
TASKS = {
    "sit": (
        "buddy", "Practice 'Sit' Command",
        "Use treats to lure Buddy into a sitting position. Say 'sit' clearly before "
        "the action. Reward immediately when successful. Practice 10 repetitions per session.",
        "daily", 10,
    ),
    "leash": (
        "buddy", "Leash Walking Practice",
        "Start with short 5-minute walks around the block. Keep the leash loose but "
        "maintain control. Reward calm walking behavior with treats.",
        "3x/week", 15,
    ),
    "recall": (
        "buddy", "Recall Training",
        "Practice 'come' command in a safe, enclosed area. Start from short distances "
        "and gradually increase. Always reward with high-value treats.",
        "daily", 5,
    ),
    "crate": (
        "max", "Crate Training",
        "Introduce Max to the crate gradually. Make it a positive space with treats "
        "and toys. Never use the crate as punishment.",
        "daily", 20,
    ),
    "stay": (
        "max", "Stay Command",
        "Start with 'sit', then add 'stay'. Begin with 5-second holds and gradually "
        "increase. Release with 'okay' command.",
        "daily", 10,
    ),
    "fetch": (
        "bella", "Fetch Training",
        "Use a favorite toy. Throw short distances at first. Reward when Bella brings "
        "the toy back. Use 'drop it' command to release.",
        "3x/week", 15,
    ),
    "nose": (
        "charlie", "Nose Work Basics",
        "Hide treats in easy spots and encourage Charlie to find them. Say 'find it' "
        "as a cue. Great mental stimulation for beagles!",
        "daily", 10,
    ),
    "grooming": (
        "daisy", "Grooming Tolerance",
        "Practice handling paws, ears, and mouth daily. Reward calm behavior. Use "
        "treats to create positive associations with grooming tools.",
        "daily", 10,
    ),
    "down": (
        "rocky", "Down Command",
        "From a sit position, lure Rocky into a down with a treat. Say 'down' before "
        "the movement. Practice on comfortable surfaces.",
        "daily", 10,
    ),
    "social": (
        "milo", "Socialization Practice",
        "Expose Milo to different sounds, people, and environments. Keep sessions "
        "short and positive. Watch for signs of stress.",
        "3x/week", 20,
    ),
}

# (task, owner, days_ago, note, trainer comment)
SUBMISSIONS = [
    ("sit", "emily", 6,
     "Buddy did really well today! He responded to the sit command 8 out of 10 times.",
     "Great progress! 8 out of 10 is excellent for this stage. Try adding a hand signal next."),
    ("recall", "emily", 5,
     "Worked on recall in the backyard. Buddy came running every time!",
     "Wonderful! Try adding some distractions next week to level up the training."),
    ("leash", "emily", 4,
     "Had a great walk around the neighborhood. Buddy only pulled a couple times at the beginning.",
     "The pulling at the beginning is normal. Try stopping and waiting when he pulls."),
    ("crate", "james", 6,
     "Max went into the crate voluntarily today for the first time!",
     "This is a huge milestone! Keep making it a positive space."),
    ("stay", "james", 3,
     "Practiced stay for 15 seconds today. Max is getting really good at waiting patiently.",
     "15 seconds is great progress! Let's aim for 30 seconds next week."),
    ("fetch", "james", 2,
     "Bella loves fetch! She brought the ball back 10 times in a row.",
     "For the drop command, try trading the ball for a treat."),
    ("nose", "lisa", 2,
     "Charlie found all 5 hidden treats in under 2 minutes!",
     "Beagles are naturals at this. Try hiding treats in harder spots next time."),
    ("grooming", "lisa", 1,
     "Daisy let me brush her for 10 minutes today without fussing.",
     "Daisy is building trust with the grooming routine. Keep up the positive associations!"),
    ("down", "david", 1,
     "Rocky struggled a bit with down today. He kept trying to stand back up.",
     "Try practicing on a soft mat and using higher value treats. Be patient!"),
    ("social", "david", 1,
     "Took Milo to the pet store. He met 3 new people and 2 dogs.",
     "Some nervousness is normal. You handled it well by keeping the session positive."),
    ("sit", "emily", 0,
     "Another great session! 9 out of 10 sits today.",
     "Almost perfect! Time to add distractions during the sit command."),
    ("crate", "james", 0,
     "Max slept in the crate all night with the door closed! No whining at all.",
     "Sleeping through the night is a major success. Outstanding progress!"),
]


# =============================================================================
# Seeding
# =============================================================================

def seed_demo_data() -> dict[str, int]:
    """
    Insert the demo data set.

    Returns:
        Row counts per table, or an empty dict when the database already has users
    """
    if SupabaseClient.fetch_many("users", columns="id", limit=1):
        logger.info("Database already has data, skipping seed")
        return {}

    logger.info("Seeding database with sample data...")
    now = utc_now()

    user_ids = {}
    for key, (email, first_name, last_name, role) in USERS.items():
        row = SupabaseClient.insert_row(
            "users",
            {"email": email, "first_name": first_name, "last_name": last_name, "role": role.value},
        )
        user_ids[key] = row["id"]

    pet_ids = {}
    for key, (name, species, owner, trainer) in PETS.items():
        row = SupabaseClient.insert_row(
            "pets",
            {
                "name": name,
                "species": species,
                "owner_id": user_ids[owner],
                "trainer_id": user_ids[trainer] if trainer else None,
            },
        )
        pet_ids[key] = row["id"]

    task_ids = {}
    task_trainers = {}
    for key, (pet, title, instructions, frequency, minutes) in TASKS.items():
        trainer_id = user_ids[PETS[pet][3]]
        row = SupabaseClient.insert_row(
            "homework_tasks",
            {
                "pet_id": pet_ids[pet],
                "created_by_trainer_id": trainer_id,
                "title": title,
                "instructions": instructions,
                "frequency": frequency,
                "expected_duration_mins": minutes,
                "is_active": True,
                "created_at": (now - timedelta(days=14)).isoformat(),
            },
        )
        task_ids[key] = row["id"]
        task_trainers[key] = trainer_id

    for task, owner, days_ago, note, comment in SUBMISSIONS:
        submitted_at = now - timedelta(days=days_ago)
        submission = SupabaseClient.insert_row(
            "homework_submissions",
            {
                "task_id": task_ids[task],
                "submitted_by_user_id": user_ids[owner],
                "note": note,
                "status": SubmissionStatus.COMPLETED.value,
                "submitted_at": submitted_at.isoformat(),
            },
        )
        SupabaseClient.insert_row(
            "trainer_comments",
            {
                "submission_id": submission["id"],
                "trainer_id": task_trainers[task],
                "comment": comment,
                "created_at": (submitted_at + timedelta(hours=2)).isoformat(),
            },
        )

    counts = {
        "users": len(USERS),
        "pets": len(PETS),
        "homework_tasks": len(TASKS),
        "homework_submissions": len(SUBMISSIONS),
        "trainer_comments": len(SUBMISSIONS),
    }
    logger.info(f"Database seeded with demo data: {counts}")
    return counts


def main():
    """Seed demo data, then backfill workspaces for the demo trainers."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    print("=" * 60)
    print("PawSync Demo Data")
    print("=" * 60)

    counts = seed_demo_data()
    if counts:
        print(", ".join(f"{count} {table}" for table, count in counts.items()))
    migrate_workspaces()


if __name__ == "__main__":
    main()
