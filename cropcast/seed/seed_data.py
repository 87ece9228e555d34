"""
Seed data script for the CropCast database.
Creates a demo account with one farm, two fields, a crop, a reminder and
two dashboard recommendations.

    python -m cropcast.seed.seed_data
"""
import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from cropcast.auth import get_password_hash
from cropcast.database import Base, SessionLocal, engine
from cropcast.models import (
    Crop,
    CropStage,
    Farm,
    Field,
    Profile,
    Recommendation,
    SeasonalReminder,
    SoilType,
    User,
)

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@cropcast.farm"
DEMO_PASSWORD = "demo-password"


def seed_database(session: Session) -> User:
    """Seed the demo account. Does nothing if it already exists."""
    existing = session.query(User).filter(User.email == DEMO_EMAIL).first()
    if existing:
        logger.info("Database already seeded, skipping...")
        return existing

    logger.info("Seeding database...")
    user = User(email=DEMO_EMAIL, password_hash=get_password_hash(DEMO_PASSWORD))
    user.profile = Profile(full_name="Demo Farmer")
    session.add(user)
    session.flush()

    farm = Farm(
        user_id=user.id,
        name="Green Valley Farm",
        location="Nairobi",
        latitude=-1.2921,
        longitude=36.8219,
        area_size=12.5,
        soil_type="Loamy",
    )
    session.add(farm)
    session.flush()

    session.add_all([
        Field(
            farm_id=farm.id,
            field_name="North Field",
            soil_type=SoilType.CLAY,
            field_location="Nairobi",
            area_size=4.0,
            previous_crops=["Wheat", "Soybeans"],
        ),
        Field(
            farm_id=farm.id,
            field_name="River Plot",
            soil_type=SoilType.SILTY,
            area_size=2.5,
            previous_crops=[],
        ),
        Crop(
            farm_id=farm.id,
            crop_type="Maize",
            variety="H614",
            current_stage=CropStage.GROWING,
            planting_date=date.today() - timedelta(days=40),
            expected_harvest_date=date.today() + timedelta(days=80),
        ),
        SeasonalReminder(
            user_id=user.id,
            title="Order fertilizer",
            description="Top dressing for the maize",
            reminder_date=date.today() + timedelta(days=7),
        ),
        Recommendation(
            user_id=user.id,
            crop_type="Beans",
            recommendation_text="Intercrop beans with maize to fix nitrogen before the long rains.",
            confidence_score=0.82,
        ),
        Recommendation(
            user_id=user.id,
            crop_type="Sorghum",
            recommendation_text="Sorghum tolerates the expected dry spell better than maize.",
            confidence_score=0.67,
        ),
    ])
    session.commit()
    logger.info("Seeded demo account %s", DEMO_EMAIL)
    return user


def main():
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()


if __name__ == "__main__":
    main()
