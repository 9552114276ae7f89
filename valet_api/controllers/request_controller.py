import logging
from typing import Any, Dict, List
from fastapi import HTTPException
from sqlmodel import Session, select
from sqlalchemy import bindparam, text
from sqlalchemy.exc import IntegrityError
from valet_api.config import Config
from valet_api.models.valet_models import ValetRequest
from valet_api.schemas.valet_schemas import RequestCreate, RequestUpdate
from valet_api.utils.dispatch_queue import DispatchQueue
from valet_api.utils.lifecycle import RequestStatus, check_transition
from valet_api.utils.timestamps import as_utc, generate_request_id, utcnow

logger = logging.getLogger(__name__)

# EXTERNAL FIELD NAME -> requests COLUMN
REQUEST_FIELDS = {
    "id": "id",
    "userId": "user_id",
    "userName": "user_name",
    "userPhone": "user_phone",
    "vehicle": "vehicle",
    "location": "location",
    "status": "status",
    "timestamp": "timestamp",
    "valetId": "valet_id",
    "valetName": "valet_name",
    "parkedTimestamp": "parked_timestamp",
    "exitTimestamp": "exit_timestamp",
    "spotId": "spot_id",
}

# THE ONLY FIELDS A PATCH MAY WRITE, APPLIED IN THIS ORDER
UPDATABLE_FIELDS = {
    "status": "status",
    "valetId": "valet_id",
    "valetName": "valet_name",
    "parkedTimestamp": "parked_timestamp",
    "exitTimestamp": "exit_timestamp",
    "spotId": "spot_id",
}

TIMESTAMP_COLUMNS = ("timestamp", "parked_timestamp", "exit_timestamp")


def to_external(record: ValetRequest) -> Dict[str, Any]:
    data = {}
    for field, column in REQUEST_FIELDS.items():
        value = getattr(record, column)
        if column in TIMESTAMP_COLUMNS:
            value = as_utc(value)
        data[field] = value
    return data


def row_columns(record: ValetRequest) -> Dict[str, Any]:
    return {column: getattr(record, column) for column in REQUEST_FIELDS.values()}


class RequestController:
    @staticmethod
    def create_request(payload: RequestCreate, db: Session, queue: DispatchQueue) -> Dict[str, Any]:
        values = payload.model_dump(exclude_unset=True, exclude_none=True)

        new_request = ValetRequest(
            id=values.get("id") or generate_request_id(),
            user_id=values.get("user_id", "999"),
            user_name=values.get("user_name", "Unknown"),
            user_phone=values.get("user_phone", ""),
            vehicle=values.get("vehicle", {}),
            location=values.get("location", ""),
            status=values.get("status", RequestStatus.REQUESTED.value),
            timestamp=as_utc(values.get("timestamp")) or utcnow(),
            valet_id=values.get("valet_id"),
            valet_name=values.get("valet_name"),
            parked_timestamp=as_utc(values.get("parked_timestamp")),
            exit_timestamp=as_utc(values.get("exit_timestamp")),
            spot_id=values.get("spot_id"),
        )

        try:
            db.add(new_request)
            db.commit()
            db.refresh(new_request)
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Rejected duplicate request {new_request.id}: {e.orig}")
            raise HTTPException(status_code=409, detail=f"Request with id {new_request.id} already exists.")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create request: {e}")
            raise HTTPException(status_code=500, detail="Internal server error while creating request.")

        logger.info(f"Created request {new_request.id} for user {new_request.user_id}")
        if new_request.status == RequestStatus.REQUESTED.value and not new_request.valet_id:
            queue.enqueue(new_request.id)

        return to_external(new_request)

    @staticmethod
    def read_requests(db: Session) -> List[Dict[str, Any]]:
        try:
            statement = select(ValetRequest).order_by(ValetRequest.timestamp.desc())
            return [to_external(record) for record in db.exec(statement).all()]
        except Exception as e:
            logger.error(f"Failed to list requests: {e}")
            raise HTTPException(status_code=500, detail="Internal server error while listing requests.")

    @staticmethod
    def read_request(request_id: int, db: Session) -> Dict[str, Any]:
        try:
            record = db.get(ValetRequest, request_id)
        except Exception as e:
            logger.error(f"Failed to read request {request_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error while reading request.")

        if not record:
            raise HTTPException(status_code=404, detail=f"Request {request_id} not found.")
        return to_external(record)

    @staticmethod
    def update_request(request_id: int, payload: RequestUpdate, db: Session,
                       queue: DispatchQueue, config: Config) -> Dict[str, Any]:
        submitted = payload.model_dump(by_alias=True, exclude_unset=True)

        changes = {}
        for field, column in UPDATABLE_FIELDS.items():
            if field not in submitted:
                continue
            value = submitted[field]
            # status IS NOT NULLABLE, A NULL FOR IT IS TREATED AS ABSENT
            if column == "status" and value is None:
                continue
            changes[column] = as_utc(value) if column in TIMESTAMP_COLUMNS else value

        if not changes:
            raise HTTPException(status_code=400, detail="No valid fields to update")

        try:
            if config.strict_transitions:
                current = db.get(ValetRequest, request_id)
                if not current:
                    raise HTTPException(status_code=404, detail=f"Request {request_id} not found.")
                violations = check_transition(row_columns(current), changes)
                if violations:
                    logger.info(f"Rejected update of request {request_id}: {'; '.join(violations)}")
                    raise HTTPException(status_code=409, detail=violations)

            assignments = ", ".join(f"{column} = :{column}" for column in changes)
            table = ValetRequest.__table__
            query = text(f"UPDATE requests SET {assignments} WHERE id = :request_id").bindparams(
                *[bindparam(column, type_=table.c[column].type) for column in changes]
            )
            result = db.execute(query, {**changes, "request_id": request_id})

            if result.rowcount == 0:
                db.rollback()
                raise HTTPException(status_code=404, detail=f"Request {request_id} not found.")

            db.commit()

        except HTTPException as http_exc:
            raise http_exc

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to update request {request_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error while updating request.")

        logger.info(f"Updated request {request_id}: {', '.join(changes)}")
        if changes.get("valet_id"):
            queue.discard(request_id)

        # THE SESSION MAY HOLD A STALE COPY FROM THE STRICT CHECK
        db.expire_all()
        return RequestController.read_request(request_id, db)

    @staticmethod
    def read_pending(queue: DispatchQueue) -> Dict[str, List[int]]:
        return {"pending": queue.pending()}
