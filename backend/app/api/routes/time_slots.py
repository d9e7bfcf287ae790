from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.time_slot import TimeSlotGenerateRequest, TimeSlotOut, TimeSlotUpdate
from app.services import time_slots

router = APIRouter()


@router.post("", response_model=list[TimeSlotOut], status_code=status.HTTP_201_CREATED)
def create_time_slots(payload: TimeSlotGenerateRequest, db: Session = Depends(get_db)) -> list[TimeSlotOut]:
    return time_slots.generate_time_slots_for_class(
        db,
        payload.class_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        period_length=payload.period_length,
        break_length=payload.break_length,
        days=payload.days,
    )


@router.get("/class/{class_id}", response_model=list[TimeSlotOut])
def list_time_slots(class_id: int, db: Session = Depends(get_db)) -> list[TimeSlotOut]:
    return time_slots.list_time_slots(db, class_id)


@router.put("/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(slot_id: int, payload: TimeSlotUpdate, db: Session = Depends(get_db)) -> TimeSlotOut:
    return time_slots.update_time_slot(db, slot_id, payload.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_slot(slot_id: int, db: Session = Depends(get_db)) -> Response:
    time_slots.delete_time_slot(db, slot_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
