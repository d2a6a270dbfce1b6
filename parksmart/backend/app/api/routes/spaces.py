from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from ...db.session import get_db
from ...db import models, schemas

router = APIRouter(prefix="/spaces", tags=["spaces"])


@router.get("", response_model=list[schemas.ParkingSpace])
def list_spaces(
    facility_name: str | None = None,
    available_only: bool = False,
    db: Session = Depends(get_db),
):
    query = db.query(models.ParkingSpace)
    if facility_name:
        query = query.filter(models.ParkingSpace.facility_name == facility_name)
    if available_only:
        query = query.filter(models.ParkingSpace.is_occupied.is_(False))
    return query.order_by(models.ParkingSpace.facility_name, models.ParkingSpace.slot_label).all()


@router.post("", response_model=schemas.ParkingSpace, status_code=status.HTTP_201_CREATED)
def create_space(payload: schemas.ParkingSpaceCreate, db: Session = Depends(get_db)):
    if db.get(models.ParkingSpace, payload.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Space already exists")
    space = models.ParkingSpace(**payload.model_dump())
    db.add(space)
    db.commit()
    db.refresh(space)
    return space


@router.get("/{space_id}", response_model=schemas.ParkingSpace)
def get_space(space_id: str, db: Session = Depends(get_db)):
    space = db.get(models.ParkingSpace, space_id)
    if not space:
        raise HTTPException(status_code=404, detail="Space not found")
    return space
