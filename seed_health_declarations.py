"""
Seed script for sample health declarations
Run this after applying the migrations; skipped when the table already has rows
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from dotenv import load_dotenv
from sqlalchemy import select, func

load_dotenv()

from app.core.logging_config import configure_logging
from app.models.health_declaration import HealthDeclaration, DeclarationStatus
from database import AsyncSessionLocal, engine

logger = logging.getLogger(__name__)

# (name, temperature, symptoms, contact details, status, hours ago, user agent)
SAMPLE_DECLARATIONS = [
    ("John Smith", "36.5", None, None, DeclarationStatus.APPROVED, 24,
     "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"),
    ("Jane Doe", "37.2", "mild headache, fatigue", None, DeclarationStatus.PENDING, 12,
     "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"),
    ("Mike Johnson", "38.5", "fever, cough, body aches", "Family member tested positive 3 days ago",
     DeclarationStatus.REJECTED, 6,
     "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) AppleWebKit/605.1.15"),
    ("Sarah Wilson", "36.8", None, "Colleague tested positive, last contact 10 days ago",
     DeclarationStatus.PENDING, 2,
     "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36"),
    ("David O'Brien", "37.0", "sore throat", None, DeclarationStatus.APPROVED, 1,
     "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"),
]


async def seed_health_declarations():
    """Insert the sample declarations into an empty table"""
    async with AsyncSessionLocal() as session:
        existing = (await session.execute(select(func.count(HealthDeclaration.id)))).scalar_one()
        if existing > 0:
            logger.info("Health declarations already seeded, skipping...")
            return

        now = datetime.now()
        for index, (name, temperature, symptoms, contact_details, status, hours_ago, user_agent) in enumerate(SAMPLE_DECLARATIONS):
            created_at = now - timedelta(hours=hours_ago)
            session.add(HealthDeclaration(
                id=str(uuid.uuid4()),
                name=name,
                temperature=Decimal(temperature),
                has_symptoms=symptoms is not None,
                symptoms=symptoms,
                has_contact=contact_details is not None,
                contact_details=contact_details,
                status=status,
                ip_address=f"192.168.1.{100 + index}",
                user_agent=user_agent,
                created_at=created_at,
                updated_at=created_at,
            ))

        await session.commit()
        logger.info(f"Seeded {len(SAMPLE_DECLARATIONS)} health declarations")


async def main():
    try:
        await seed_health_declarations()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
