from pydantic import BaseModel, Field
from typing import Dict, Any, Optional

from registry.records import VehicleRecord


class UpsertRequest(BaseModel):
    new_car: VehicleRecord = Field(alias="newCar")


class VehicleCreated(BaseModel):
    message: str = "Vehicle added successfully"
    newVehicle: Dict[str, Any]


class VehicleUpdated(BaseModel):
    message: str = "Vehicle updated successfully"
    updatedVehicle: Dict[str, Any]


class ImageUploaded(BaseModel):
    message: str = "Image uploaded successfully"
    imageUrl: str


class HealthStatus(BaseModel):
    status: str
    data_path: str
    initialized: bool
    vehicle_count: Optional[int] = None
