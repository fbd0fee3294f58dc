from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rental_service.database import Base
from rental_service.geocoding import Coordinates, GeocodeEnricher
from rental_service.models import Car, Rental, User
from rental_service.pipeline import RentalPipeline
from rental_service.repository import RentalRepository

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_rental(**overrides) -> Rental:
    fields = {
        "user_id": 1,
        "car_id": 1,
        "status": 0,
        "start_location": "12 Main St.",
        "end_location": "Airport (Terminal 2)",
        "start_time": NOW + timedelta(days=1),
        "end_time": NOW + timedelta(days=3),
        "price": "25.00",
        "terms": None,
    }
    fields.update(overrides)
    return Rental(**fields)


class FakeLocator:
    def __init__(self, places=None, error=None):
        self.places = places or {}
        self.error = error
        self.queries = []

    def __call__(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.places.get(query)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(db):
    return RentalRepository(db)


@pytest.fixture
def locator():
    return FakeLocator({
        "12 Main St.": Coordinates(40.7128, -74.0060),
        "Airport (Terminal 2)": Coordinates(40.6413, -73.7781),
    })


@pytest.fixture
def pipeline(repository, locator):
    return RentalPipeline(repository, GeocodeEnricher(locator), now=lambda: NOW)


@pytest.fixture
def owner(repository):
    user = repository.add(User(name="Owner", rentals_count=0, renter_rentals_count=0))
    repository.commit()
    return user


@pytest.fixture
def renter(repository):
    user = repository.add(User(name="Renter", rentals_count=0, renter_rentals_count=0))
    repository.commit()
    return user


@pytest.fixture
def car(repository):
    car = repository.add(Car(brand="Toyota", model="Corolla", registration_number="AB-123"))
    repository.commit()
    return car
