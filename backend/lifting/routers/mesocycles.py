from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from lifting.db import get_db
from lifting.schemas.mesocycle import (
    MesocycleStart,
    MesocycleRead,
    MesocycleStarted,
    MesocycleDetailsRead,
)
from lifting.services.mesocycle_service import MesocycleService
from lifting.deps.user import get_current_user, ensure_owner
from lifting.models import User

router = APIRouter(prefix="/mesocycles", tags=["mesocycles"])

def _owned(service: MesocycleService, mesocycle_id: int, current: User):
    meso = service.get(mesocycle_id)
    ensure_owner(meso.user_id, current, "mesocycle")
    return meso

@router.post("", response_model=MesocycleStarted, status_code=status.HTTP_201_CREATED)
def start_mesocycle(payload: MesocycleStart, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    service = MesocycleService(db)
    params = dict(
        plan_id=payload.plan_id,
        start_date=payload.start_date,
        total_weeks=payload.total_weeks,
        deload_week=payload.deload_week,
    )
    if not payload.activate:
        meso = service.create(current.id, **params)
        return MesocycleStarted(mesocycle=MesocycleRead.model_validate(meso), workout_count=0)
    meso, count = service.start_new(current.id, **params)
    return MesocycleStarted(mesocycle=MesocycleRead.model_validate(meso), workout_count=count)

@router.get("", response_model=list[MesocycleRead])
def list_mesocycles(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return MesocycleService(db).mesocycles.list_by_user(current.id)

@router.get("/active", response_model=MesocycleDetailsRead | None)
def get_active(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    service = MesocycleService(db)
    meso = service.get_active(current.id)
    if meso is None:
        return None
    return MesocycleDetailsRead.model_validate(service.get_details(meso.id))

@router.get("/{mesocycle_id}", response_model=MesocycleDetailsRead)
def get_mesocycle(mesocycle_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    service = MesocycleService(db)
    _owned(service, mesocycle_id, current)
    return MesocycleDetailsRead.model_validate(service.get_details(mesocycle_id))

@router.put("/{mesocycle_id}/start", response_model=MesocycleStarted)
def activate_mesocycle(mesocycle_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    service = MesocycleService(db)
    _owned(service, mesocycle_id, current)
    meso, count = service.start(mesocycle_id)
    return MesocycleStarted(mesocycle=MesocycleRead.model_validate(meso), workout_count=count)

@router.put("/{mesocycle_id}/complete", response_model=MesocycleRead)
def complete_mesocycle(mesocycle_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    service = MesocycleService(db)
    _owned(service, mesocycle_id, current)
    return service.complete(mesocycle_id)

@router.put("/{mesocycle_id}/cancel", response_model=MesocycleRead)
def cancel_mesocycle(mesocycle_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    service = MesocycleService(db)
    _owned(service, mesocycle_id, current)
    return service.cancel(mesocycle_id)
