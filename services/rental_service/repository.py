from typing import List, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from rental_service.models import Car, Rental, User


class RecordNotFound(LookupError):
    pass


class RentalRepository:
    """SQLAlchemy-backed store for rentals, their owners, renters and cars.

    Writes are flushed but never committed here; the pipelines decide where a
    unit of work ends.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_rental(self, rental_id: int) -> Optional[Rental]:
        return self.db.get(Rental, rental_id)

    def list_rentals(self, user_id: Optional[int] = None) -> List[Rental]:
        query = self.db.query(Rental)
        if user_id is not None:
            query = query.filter(Rental.user_id == user_id)
        return query.order_by(Rental.start_time).all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_user(self, user_id: int) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise RecordNotFound(f"User {user_id} not found")
        return user

    def get_car(self, car_id: int) -> Optional[Car]:
        return self.db.get(Car, car_id)

    def add(self, record):
        self.db.add(record)
        self.db.flush()
        return record

    def count_rentals_for_car(self, car_id: int) -> int:
        return self.db.query(Rental).filter(Rental.car_id == car_id).count()

    def persist(self, rental: Rental) -> Rental:
        is_new = not inspect(rental).persistent
        self.db.add(rental)
        self.db.flush()
        if is_new:
            self._bump(User.rentals_count, rental.user_id, 1)
        return rental

    def delete(self, rental: Rental) -> None:
        self.db.delete(rental)
        self.db.flush()
        self._bump(User.rentals_count, rental.user_id, -1)

    def delete_car(self, car: Car) -> None:
        self.db.delete(car)
        self.db.flush()

    def increment_renter_count(self, user: User) -> None:
        self._bump(User.renter_rentals_count, user.id, 1)

    def decrement_renter_count(self, user: User) -> None:
        self._bump(User.renter_rentals_count, user.id, -1)

    def _bump(self, column, user_id: int, delta: int) -> None:
        # Single UPDATE on the counter column, no read-modify-write on the row
        self.db.query(User).filter(User.id == user_id).update(
            {column: column + delta}, synchronize_session="fetch"
        )

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
