from fastapi import APIRouter
from typing import List
from valet_api.controllers.parking_controller import ParkingController
from valet_api.schemas.valet_schemas import ParkingSpotResponse, GenericResponse


router = APIRouter(prefix="/api")

@router.get("/health", response_model=GenericResponse)
def health():
    return GenericResponse(status="ok", message="Smart Parking API is running")

@router.get("/parking", response_model=List[ParkingSpotResponse])
def read_parking_spots():
    return ParkingController.read_parking_spots()
