from fastapi import FastAPI, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
import uvicorn

from rental_service.clock import utcnow
from rental_service.config import PORT
from rental_service.database import engine, get_db, Base
from rental_service.geocoding import GeocodeEnricher, locate_nothing
from rental_service.lifecycle import LifecycleViolation
from rental_service.models import Car, Rental, User
from rental_service.pipeline import RentalPipeline, SaveResult
from rental_service.repository import RecordNotFound, RentalRepository
from rental_service.schemas import (
    RentalCreate, RentalUpdate, RentalResponse, ClaimRequest, StatusResponse,
    UserCreate, UserResponse, CarCreate, CarResponse, ErrorResponse
)
from rental_service.status import StatusCode, label_of, badge_class_of

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Rental Service")

# Deployments with a geocoding provider override get_enricher
geocode_enricher = GeocodeEnricher(locate_nothing)


@app.on_event("startup")
def startup_event():
    Base.metadata.create_all(bind=engine)
    logger.info("Rental tables ready")


def get_enricher() -> GeocodeEnricher:
    return geocode_enricher


def get_clock():
    return utcnow


def get_repository(db: Session = Depends(get_db)) -> RentalRepository:
    return RentalRepository(db)


def get_pipeline(
    repository: RentalRepository = Depends(get_repository),
    enricher: GeocodeEnricher = Depends(get_enricher),
    now=Depends(get_clock)
) -> RentalPipeline:
    return RentalPipeline(repository, enricher, now=now)


def get_rental_or_404(rental_id: int, repository: RentalRepository) -> Rental:
    rental = repository.get_rental(rental_id)
    if not rental:
        raise HTTPException(status_code=404, detail="Rental not found")
    return rental


def raise_for_result(result: SaveResult):
    if not result.ok:
        raise HTTPException(
            status_code=422,
            detail=ErrorResponse(message="Rental is invalid", errors=result.errors.to_dict()).model_dump()
        )


@app.get("/manage/health")
def health_check():
    return {"status": "ok"}


@app.get("/api/v1/statuses", response_model=List[StatusResponse])
def get_statuses():
    return [
        StatusResponse(code=int(code), label=label_of(code), badge_class=badge_class_of(code))
        for code in StatusCode
    ]


@app.post("/api/v1/users", response_model=UserResponse)
def create_user(user: UserCreate, repository: RentalRepository = Depends(get_repository)):
    db_user = repository.add(User(name=user.name, rentals_count=0, renter_rentals_count=0))
    repository.commit()
    return db_user


@app.get("/api/v1/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, repository: RentalRepository = Depends(get_repository)):
    user = repository.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@app.post("/api/v1/cars", response_model=CarResponse)
def create_car(car: CarCreate, repository: RentalRepository = Depends(get_repository)):
    db_car = repository.add(Car(**car.model_dump()))
    repository.commit()
    return db_car


@app.delete("/api/v1/cars/{car_id}", status_code=204)
def delete_car(
    car_id: int,
    repository: RentalRepository = Depends(get_repository),
    pipeline: RentalPipeline = Depends(get_pipeline)
):
    car = repository.get_car(car_id)
    if not car:
        raise HTTPException(status_code=404, detail="Car not found")

    try:
        pipeline.delete_car(car)
    except LifecycleViolation as e:
        raise HTTPException(status_code=409, detail=str(e))
    return None


@app.post("/api/v1/rentals", response_model=RentalResponse)
def create_rental(rental: RentalCreate, pipeline: RentalPipeline = Depends(get_pipeline)):
    db_rental = Rental(**rental.model_dump())
    raise_for_result(pipeline.save(db_rental))
    return db_rental


@app.get("/api/v1/rentals", response_model=List[RentalResponse])
def get_rentals(
    user_id: Optional[int] = Query(None, alias="userId"),
    repository: RentalRepository = Depends(get_repository)
):
    return repository.list_rentals(user_id)


@app.get("/api/v1/rentals/{rental_id}", response_model=RentalResponse)
def get_rental(rental_id: int, repository: RentalRepository = Depends(get_repository)):
    return get_rental_or_404(rental_id, repository)


@app.patch("/api/v1/rentals/{rental_id}", response_model=RentalResponse)
def update_rental(
    rental_id: int,
    changes: RentalUpdate,
    repository: RentalRepository = Depends(get_repository),
    pipeline: RentalPipeline = Depends(get_pipeline)
):
    rental = get_rental_or_404(rental_id, repository)
    for name, value in changes.model_dump(exclude_unset=True).items():
        if getattr(rental, name) != value:
            setattr(rental, name, value)

    raise_for_result(pipeline.save(rental))
    return rental


@app.post("/api/v1/rentals/{rental_id}/claim", response_model=RentalResponse)
def claim_rental(
    rental_id: int,
    claim: ClaimRequest,
    repository: RentalRepository = Depends(get_repository),
    pipeline: RentalPipeline = Depends(get_pipeline)
):
    rental = get_rental_or_404(rental_id, repository)
    try:
        result = pipeline.claim(rental, claim.renter_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LifecycleViolation as e:
        raise HTTPException(status_code=409, detail=str(e))

    raise_for_result(result)
    return rental


@app.delete("/api/v1/rentals/{rental_id}", status_code=204)
def delete_rental(
    rental_id: int,
    repository: RentalRepository = Depends(get_repository),
    pipeline: RentalPipeline = Depends(get_pipeline)
):
    rental = get_rental_or_404(rental_id, repository)
    try:
        pipeline.destroy(rental)
    except LifecycleViolation as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
