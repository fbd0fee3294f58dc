from datetime import timezone

from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, inspect
from sqlalchemy.types import TypeDecorator

from rental_service.database import Base
from rental_service.status import MAX_STATUS, StatusCode, label_of, badge_class_of


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC timestamps, also on backends that drop the offset."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(80), nullable=False)
    rentals_count = Column(Integer, nullable=False, default=0)
    renter_rentals_count = Column(Integer, nullable=False, default=0)


class Car(Base):
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    brand = Column(String(80), nullable=False)
    model = Column(String(80), nullable=False)
    registration_number = Column(String(20), nullable=False)


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    car_id = Column(Integer, nullable=False, index=True)
    renter_id = Column(Integer, index=True)
    status = Column(Integer, nullable=False, default=int(StatusCode.AVAILABLE))
    start_location = Column(String(64), nullable=False)
    end_location = Column(String(64), nullable=False)
    start_latitude = Column(Float)
    start_longitude = Column(Float)
    end_latitude = Column(Float)
    end_longitude = Column(Float)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    price = Column(String(8), nullable=False)
    terms = Column(String(256))

    __table_args__ = (
        CheckConstraint(
            f"status >= 0 AND status <= {MAX_STATUS}",
            name="rental_status_check"
        ),
    )

    # Instances loaded from the database never go through __init__
    skip_in_seed = False

    def __init__(self, skip_in_seed: bool = False, **kwargs):
        kwargs.setdefault("status", int(StatusCode.AVAILABLE))
        super().__init__(**kwargs)
        self.skip_in_seed = skip_in_seed

    @property
    def status_label(self) -> str:
        return label_of(self.status)

    @property
    def status_class(self) -> str:
        return badge_class_of(self.status)

    def changed_attributes(self) -> set[str]:
        """Column names modified since the instance was created or loaded."""
        state = inspect(self)
        return {
            attr.key for attr in state.attrs
            if attr.history.has_changes()
        }
