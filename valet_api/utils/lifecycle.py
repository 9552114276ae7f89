from enum import Enum
from typing import Any, Dict, List, Mapping
from valet_api.utils.timestamps import as_utc


class RequestStatus(str, Enum):
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    PARKED = "parked"
    COMPLETED = "completed"


STAGE_ORDER = [status.value for status in RequestStatus]


def derive_stage(fields: Mapping[str, Any]) -> RequestStatus:
    # STAGE IMPLIED BY THE FILLED-IN LIFECYCLE COLUMNS, status ITSELF IS IGNORED
    if fields.get("exit_timestamp"):
        return RequestStatus.COMPLETED
    if fields.get("parked_timestamp") or fields.get("spot_id"):
        return RequestStatus.PARKED
    if fields.get("valet_id"):
        return RequestStatus.ACCEPTED
    return RequestStatus.REQUESTED


def check_transition(current: Mapping[str, Any], changes: Mapping[str, Any]) -> List[str]:
    # EMPTY LIST MEANS current OVERLAID WITH changes IS A CONSISTENT REQUEST
    merged: Dict[str, Any] = {**current, **changes}
    violations = []

    if bool(merged.get("valet_id")) != bool(merged.get("valet_name")):
        violations.append("valetId and valetName must be set together")

    if merged.get("spot_id") and not merged.get("valet_id"):
        violations.append("spotId can only be set once a valet is assigned")

    created = as_utc(merged.get("timestamp"))
    parked = as_utc(merged.get("parked_timestamp"))
    exited = as_utc(merged.get("exit_timestamp"))

    if parked and created and parked < created:
        violations.append("parkedTimestamp cannot precede timestamp")

    if exited and not parked:
        violations.append("exitTimestamp cannot be set on a request that was never parked")
    elif exited and parked and exited < parked:
        violations.append("exitTimestamp cannot precede parkedTimestamp")

    new_status = changes.get("status")
    old_status = current.get("status")
    if new_status in STAGE_ORDER and old_status in STAGE_ORDER:
        if STAGE_ORDER.index(new_status) < STAGE_ORDER.index(old_status):
            violations.append(f"status cannot move back from '{old_status}' to '{new_status}'")

    if new_status in STAGE_ORDER:
        stage = derive_stage(merged)
        if STAGE_ORDER.index(new_status) > STAGE_ORDER.index(stage.value):
            violations.append(f"status '{new_status}' is ahead of the recorded fields, which only reach '{stage.value}'")

    return violations
