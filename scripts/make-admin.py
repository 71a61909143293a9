"""
Grant admin rights to an existing account.

Sets the ``admin`` custom claim in Firebase Auth and ``users.is_admin`` in the
database (creating a pending profile if the user never called the API).

Usage (project root, .env configured):
    python scripts/make-admin.py someone@example.com

The user must sign out and in again so the new claim reaches their token.
"""

import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from firebase_admin import auth as firebase_auth

from app.core.config import Settings
from app.database.models.user import User
from app.database.session import Database
from app.utils.enums import MembershipStatus
from app.utils.firebase_config import init_firebase_app
from app.utils.time_utils import MEMBERSHIP_PERIOD, utcnow


async def grant(email: str) -> None:
    settings = Settings.from_env()
    firebase_app = init_firebase_app(settings.firebase_credentials)

    record = firebase_auth.get_user_by_email(email, app=firebase_app)
    print(f"  User found: {email} (uid={record.uid})")

    firebase_auth.set_custom_user_claims(record.uid, {"admin": True}, app=firebase_app)
    print("  Custom claim set (admin: true)")

    database = Database.from_settings(settings)
    try:
        async with database.session() as session:
            user = await session.get(User, record.uid)
            if user is None:
                user = User(
                    id=record.uid,
                    email=record.email or email,
                    display_name=record.display_name,
                    membership_status=MembershipStatus.PENDING,
                    membership_expires_at=utcnow() + MEMBERSHIP_PERIOD,
                )
                session.add(user)
                print("  Profile created")
            user.is_admin = True
        print("  users.is_admin = true")
    finally:
        await database.dispose()


def main() -> None:
    if len(sys.argv) != 2:
        print("Usage: python scripts/make-admin.py <email>")
        sys.exit(1)
    asyncio.run(grant(sys.argv[1]))
    print("Done. Sign out and in again to refresh the token.")


if __name__ == "__main__":
    main()
