from typing import List
from valet_api.schemas.valet_schemas import ParkingSpotResponse

MOCK_SPOTS = [
    {"id": 1, "name": "Phoenix Mall", "location": "City Center", "status": "Available", "price": 50},
    {"id": 2, "name": "Central Plaza", "location": "Downtown", "status": "Full", "price": 40},
    {"id": 3, "name": "City Center Mall", "location": "Westside", "status": "Available", "price": 35},
]


class ParkingController:
    @staticmethod
    def read_parking_spots() -> List[ParkingSpotResponse]:
        return [ParkingSpotResponse(**spot) for spot in MOCK_SPOTS]
