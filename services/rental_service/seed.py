"""Sample data for local development.

Seeded rentals are spread around the current time, so most of them would fail
the time-window rules; they are built with ``skip_in_seed`` to bypass those.
"""
import logging
import random
from datetime import timedelta

from rental_service.clock import utcnow
from rental_service.database import Base, SessionLocal, engine
from rental_service.geocoding import GeocodeEnricher, locate_nothing
from rental_service.models import Car, Rental, User
from rental_service.pipeline import RentalPipeline
from rental_service.repository import RentalRepository
from rental_service.status import MAX_STATUS, StatusCode

logger = logging.getLogger(__name__)

LOCATIONS = [
    "221B Baker Street, London",
    "1600 Amphitheatre Pkwy, Mountain View",
    "Union Station (Main Hall)",
    "O'Hare Airport Terminal 3",
    "Pier #39, San Francisco",
]


def seed_rentals(pipeline: RentalPipeline, user_id: int, car_id: int, count: int = 10, rng=None):
    rng = rng or random.Random()
    now = pipeline.now()
    rentals = []
    for _ in range(count):
        start_time = now + timedelta(days=rng.randint(-30, 30), hours=rng.randint(0, 23))
        status = rng.randint(0, MAX_STATUS)
        rental = Rental(
            skip_in_seed=True,
            user_id=user_id,
            car_id=car_id,
            # in-progress rentals cannot be deleted, keep the sample easy to clean up
            status=int(StatusCode.COMPLETED) if status == StatusCode.IN_PROGRESS else status,
            start_location=rng.choice(LOCATIONS),
            end_location=rng.choice(LOCATIONS),
            start_time=start_time,
            end_time=start_time + timedelta(days=rng.randint(1, 7)),
            price=f"{rng.randint(20, 400)}.{rng.randint(0, 9)}",
        )
        result = pipeline.save(rental)
        if not result.ok:
            logger.warning(f"Skipped seed rental: {result.errors.full_messages()}")
            continue
        rentals.append(rental)
    return rentals


def main(count: int = 10):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        repository = RentalRepository(db)
        user = repository.add(User(name="Seed Owner", rentals_count=0, renter_rentals_count=0))
        car = repository.add(Car(brand="Toyota", model="Corolla", registration_number="SEED-001"))
        repository.commit()

        pipeline = RentalPipeline(repository, GeocodeEnricher(locate_nothing), now=utcnow)
        rentals = seed_rentals(pipeline, user.id, car.id, count)
        logger.info(f"Seeded {len(rentals)} rentals for user {user.id}")
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
