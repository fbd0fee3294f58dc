from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class RentalBase(BaseModel):
    car_id: Optional[int] = Field(None, validation_alias="carId")
    status: Optional[int] = None
    start_location: Optional[str] = Field(None, validation_alias="startLocation")
    end_location: Optional[str] = Field(None, validation_alias="endLocation")
    start_time: Optional[datetime] = Field(None, validation_alias="startTime")
    end_time: Optional[datetime] = Field(None, validation_alias="endTime")
    price: Optional[str] = None
    terms: Optional[str] = None

    class Config:
        populate_by_name = True


class RentalCreate(RentalBase):
    user_id: Optional[int] = Field(None, validation_alias="userId")
    status: Optional[int] = 0


class RentalUpdate(RentalBase):
    pass


class ClaimRequest(BaseModel):
    renter_id: int = Field(validation_alias="renterId")

    class Config:
        populate_by_name = True


class RentalResponse(BaseModel):
    id: int
    user_id: int = Field(serialization_alias="userId")
    car_id: int = Field(serialization_alias="carId")
    renter_id: Optional[int] = Field(None, serialization_alias="renterId")
    status: int
    status_label: str = Field(serialization_alias="statusLabel")
    status_class: str = Field(serialization_alias="statusClass")
    start_location: str = Field(serialization_alias="startLocation")
    end_location: str = Field(serialization_alias="endLocation")
    start_latitude: Optional[float] = Field(None, serialization_alias="startLatitude")
    start_longitude: Optional[float] = Field(None, serialization_alias="startLongitude")
    end_latitude: Optional[float] = Field(None, serialization_alias="endLatitude")
    end_longitude: Optional[float] = Field(None, serialization_alias="endLongitude")
    start_time: datetime = Field(serialization_alias="startTime")
    end_time: datetime = Field(serialization_alias="endTime")
    price: str
    terms: Optional[str] = None

    class Config:
        from_attributes = True
        populate_by_name = True


class StatusResponse(BaseModel):
    code: int
    label: str
    badge_class: str = Field(serialization_alias="badgeClass")

    class Config:
        populate_by_name = True


class UserCreate(BaseModel):
    name: str


class UserResponse(BaseModel):
    id: int
    name: str
    rentals_count: int = Field(serialization_alias="rentalsCount")
    renter_rentals_count: int = Field(serialization_alias="renterRentalsCount")

    class Config:
        from_attributes = True
        populate_by_name = True


class CarCreate(BaseModel):
    brand: str
    model: str
    registration_number: str = Field(validation_alias="registrationNumber")

    class Config:
        populate_by_name = True


class CarResponse(BaseModel):
    id: int
    brand: str
    model: str
    registration_number: str = Field(serialization_alias="registrationNumber")

    class Config:
        from_attributes = True
        populate_by_name = True


class ErrorResponse(BaseModel):
    message: str
    errors: dict[str, list[str]] = {}
