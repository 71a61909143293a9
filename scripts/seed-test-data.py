"""
Seed data for trying the API locally in dev mode (AUTH_DEV_MODE=true).

Creates:
- Admin: dev-admin (X-Dev-User: dev-admin), active membership
- Member: dev-member (X-Dev-User: dev-member), active membership, two articles
- Pending: dev-pending (X-Dev-User: dev-pending), membership pending
- The default categories when the table is empty

Usage (project root, .env configured):
    python scripts/seed-test-data.py

Requires: database reachable, migrations applied (alembic upgrade head).
"""

import asyncio

from dotenv import load_dotenv

load_dotenv()

from app.core.config import Settings
from app.core.services.category_service import CategoryService
from app.core.services.membership_service import activate_membership
from app.database.models.article import Article
from app.database.models.user import User
from app.database.session import Database
from app.utils.enums import ArticleCondition, MembershipStatus
from app.utils.time_utils import MEMBERSHIP_PERIOD, utcnow

USERS = [
    # uid, email, name, admin, active membership
    ("dev-admin", "admin@trueque.local", "Admin Dev", True, True),
    ("dev-member", "member@trueque.local", "Socio Dev", False, True),
    ("dev-pending", "pending@trueque.local", "Pendiente Dev", False, False),
]

IMAGES = [f"https://picsum.photos/seed/trueque{i}/600/600" for i in range(3)]


async def seed() -> None:
    settings = Settings.from_env()
    database = Database.from_settings(settings)
    now = utcnow()
    try:
        async with database.session() as session:
            for uid, email, name, is_admin, active in USERS:
                user = await session.get(User, uid)
                if user is None:
                    user = User(
                        id=uid,
                        email=email,
                        display_name=name,
                        membership_status=MembershipStatus.PENDING,
                        membership_expires_at=now + MEMBERSHIP_PERIOD,
                    )
                    session.add(user)
                    print(f"  Created user: {uid}")
                else:
                    print(f"  User exists: {uid}")
                user.is_admin = is_admin
                if active:
                    activate_membership(user, now)
            await session.flush()

            member = await session.get(User, "dev-member")
            if member.articles_published == 0:
                for title, price in (("Polerón talla 12", 8000), ("Libro Lenguaje 5° básico", 5000)):
                    session.add(Article(
                        seller_id=member.id,
                        title=title,
                        description=f"{title}, en buen estado.",
                        category="uniformes" if price == 8000 else "libros",
                        condition=ArticleCondition.GOOD,
                        price=price,
                        images=IMAGES,
                    ))
                member.articles_published = 2
                print("  Created 2 articles for dev-member")

            created = await CategoryService(session).seed_defaults()
            print(f"  Categories seeded: {created}")
    finally:
        await database.dispose()


def main() -> None:
    asyncio.run(seed())
    print("Seed complete.")


if __name__ == "__main__":
    main()
