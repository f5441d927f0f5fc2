from __future__ import annotations

import asyncio

import bcrypt


def hash_password(plain: str, *, rounds: int) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def _check_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("ascii"))
    except ValueError:
        return False


async def verify_password(plain: str, hashed: str) -> bool:
    # bcrypt runs in a worker thread.
    return await asyncio.to_thread(_check_password, plain, hashed)
