"""
Management commands.

    python -m app.manage create-admin <email> <password> <name> [phone]

Admins cannot sign themselves up; this is the only way to create one.
"""
import asyncio
import logging
import sys

from app import database
from app.errors import CareerBridgeError
from app.services import user_directory
from app.services.store import DocumentStore

logger = logging.getLogger(__name__)

USAGE = "Usage: python -m app.manage create-admin <email> <password> <name> [phone]"


async def create_admin(email: str, password: str, name: str, phone: str) -> str:
    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)

    try:
        async with database.AsyncSessionLocal() as db:
            user = await user_directory.create_admin(DocumentStore(db), email, password, name, phone)
    finally:
        await database.engine.dispose()
    return user.uid


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if len(argv) < 4 or argv[0] != "create-admin":
        print(USAGE)
        return 1

    email, password, name = argv[1], argv[2], argv[3]
    phone = argv[4] if len(argv) > 4 else "n/a"
    try:
        uid = asyncio.run(create_admin(email, password, name, phone))
    except CareerBridgeError as e:
        print(f"Could not create admin: {e}")
        return 1

    print(f"Created admin {email} ({uid})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
