# user_api/services/seed_service.py
"""
Synthetic user generation for development and load testing.

Emails are made unique against a running set (seeded with what the store
already holds) with a bounded number of random draws, then a timestamp
fallback. This is best effort: a concurrent writer can still take an
address between the snapshot and the insert.
"""

import logging
import random
import time
from typing import Callable, Dict, List, Optional, Set

from user_api.models.user import User
from user_api.repositories import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_SEED_COUNT = 5000
MAX_EMAIL_ATTEMPTS = 10
SAMPLE_SIZE = 5

FIRST_NAMES = [
    "John", "Jane", "Mike", "Sarah", "David", "Emily", "Chris", "Amanda", "James", "Lisa",
    "Robert", "Jennifer", "Michael", "Mary", "William", "Patricia", "Richard", "Linda",
    "Joseph", "Barbara", "Thomas", "Elizabeth", "Charles", "Susan", "Christopher", "Jessica",
    "Daniel", "Matthew", "Karen", "Anthony", "Nancy", "Mark", "Betty", "Donald",
    "Dorothy", "Steven", "Helen", "Paul", "Sandra", "Andrew", "Ashley", "Joshua", "Donna",
    "Kenneth", "Carol", "Kevin", "Ruth", "Brian", "Sharon", "George", "Michelle", "Edward",
    "Laura", "Ronald", "Timothy", "Kimberly", "Jason", "Deborah", "Jeffrey", "Cynthia",
]

EMAIL_DOMAINS = [
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "aol.com", "icloud.com",
    "protonmail.com", "zoho.com", "mail.com", "inbox.com", "example.com", "test.com",
]


def _random_email(rng: random.Random) -> str:
    first = rng.choice(FIRST_NAMES).lower()
    domain = rng.choice(EMAIL_DOMAINS)
    return f"{first}{rng.randrange(10000)}@{domain}"


def generate_users(
    count: int,
    used_emails: Set[str],
    rng: Optional[random.Random] = None,
    clock: Callable[[], float] = time.time,
) -> List[Dict[str, str]]:
    """
    Build ``count`` user dicts whose emails are not in ``used_emails``.

    ``used_emails`` is updated in place with every address handed out.
    """
    rng = rng or random.Random()
    base_ms = int(clock() * 1000)
    users = []

    for i in range(count):
        email = _random_email(rng)
        attempt = 1
        while email in used_emails and attempt < MAX_EMAIL_ATTEMPTS:
            email = _random_email(rng)
            attempt += 1

        if email in used_emails:
            fallback = base_ms + i
            email = f"user{fallback}@example.com"
            while email in used_emails:
                fallback += count
                email = f"user{fallback}@example.com"

        used_emails.add(email)
        users.append({
            "name": f"{rng.choice(FIRST_NAMES)} {rng.choice(FIRST_NAMES)}",
            "email": email,
        })

    return users


class SeedService:
    def __init__(self, user_repo: UserRepository, default_count: int = DEFAULT_SEED_COUNT):
        self._user_repo = user_repo
        self._default_count = default_count

    async def seed(self, count: Optional[int] = None, rng: Optional[random.Random] = None) -> List[User]:
        if not count or count < 1:
            count = self._default_count

        used_emails = await self._user_repo.all_emails()
        users_data = generate_users(count, used_emails, rng=rng)

        created = await self._user_repo.insert_many(users_data)
        logger.info("Seeded %d of %d requested users", len(created), count)
        return created
