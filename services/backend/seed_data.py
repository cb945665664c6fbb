"""
Seed data for local testing
Creates a few invites of every kind for one resident
"""
import asyncio
from datetime import time, timedelta

from dotenv import load_dotenv
load_dotenv()

from config import get_settings
from domain.clock import EstateClock
from domain.scan import build_scan_uri
from domain.services import InviteService
from infrastructure.database import dispose_engine, get_session_maker, init_db
from infrastructure.stores import InviteStore

RESIDENT_ID = "seed-resident-1"
ADDRESS = "Block 4, Flat 2"
ESTATE_ID = "seed-estate"


async def seed_database():
    """Seed the database with test invites"""
    print("🌱 Starting database seeding...")
    settings = get_settings()

    await init_db()
    print("✅ Database initialized")

    clock = EstateClock(settings.estate_timezone)
    service = InviteService(InviteStore(get_session_maker()), clock)
    now = clock.now_local().replace(second=0, microsecond=0)

    one_time = await service.create_invite(
        resident_name="Ada Obi",
        visitor_name="Chidi Eze",
        visitor_phone="+2348000000001",
        address=ADDRESS,
        estate_id=ESTATE_ID,
        created_by=RESIDENT_ID,
        start_date_time=now,
        end_date_time=now + timedelta(hours=4),
    )
    utility = await service.create_invite(
        resident_name="Ada Obi",
        visitor_name="Musa (cleaner)",
        address=ADDRESS,
        estate_id=ESTATE_ID,
        created_by=RESIDENT_ID,
        start_date_time=now,
        end_date_time=now + timedelta(days=30),
        is_recurring=True,
    )
    group = await service.create_group_invite(
        resident_name="Ada Obi",
        address=ADDRESS,
        estate_id=ESTATE_ID,
        created_by=RESIDENT_ID,
        visit_date=now.date(),
        start_time=time(0, 0),
        end_time=time(23, 59),
        group_name="Birthday guests",
    )

    for invite in (one_time, utility, group):
        print(f"   ✅ {invite.kind.value}: otp={invite.otp}")
        print(f"      {build_scan_uri(invite.id, invite.otp, settings.scan_uri_scheme)}")

    await dispose_engine()
    print("\n🎉 Seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_database())
