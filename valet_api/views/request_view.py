from fastapi import APIRouter, Depends
from typing import Any, Dict, List
from sqlmodel import Session
from valet_api.config import Config
from valet_api.controllers.request_controller import RequestController
from valet_api.database import get_db, get_config, get_queue
from valet_api.schemas.valet_schemas import RequestCreate, RequestUpdate
from valet_api.utils.dispatch_queue import DispatchQueue


router = APIRouter(prefix="/api/requests")

@router.get("", response_model=List[Dict[str, Any]])
def read_requests(db: Session = Depends(get_db)):
    return RequestController.read_requests(db)

@router.post("", response_model=Dict[str, Any], status_code=201)
def create_request(payload: RequestCreate, db: Session = Depends(get_db),
                   queue: DispatchQueue = Depends(get_queue)):
    return RequestController.create_request(payload, db, queue)

# BEFORE /{request_id} SO "queue" IS NOT READ AS AN ID
@router.get("/queue", response_model=Dict[str, List[int]])
def read_pending_requests(queue: DispatchQueue = Depends(get_queue)):
    return RequestController.read_pending(queue)

@router.get("/{request_id}", response_model=Dict[str, Any])
def read_request(request_id: int, db: Session = Depends(get_db)):
    return RequestController.read_request(request_id, db)

@router.patch("/{request_id}", response_model=Dict[str, Any])
def update_request(request_id: int, payload: RequestUpdate, db: Session = Depends(get_db),
                   queue: DispatchQueue = Depends(get_queue), config: Config = Depends(get_config)):
    return RequestController.update_request(request_id, payload, db, queue, config)
