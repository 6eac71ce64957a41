from __future__ import annotations
from fastapi import APIRouter, Depends, Header, Query
from typing import Optional

from .. import schemas
from .deps import Services, get_services, raise_for_outcome, require_admin

router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get("", response_model=list[schemas.DoctorOut])
def list_doctors(
    name: Optional[str] = None,
    specialty: Optional[str] = None,
    time: Optional[str] = Query(default=None, pattern="^([aA][mM]|[pP][mM])$", description="am | pm"),
    svc: Services = Depends(get_services),
):
    return svc.doctors.filter_doctors(name=name, specialty=specialty, period=time)


@router.post("", status_code=201, response_model=schemas.DoctorOut)
def create_doctor(
    req: schemas.DoctorIn,
    x_admin_token: str | None = Header(default=None),
    svc: Services = Depends(get_services),
):
    require_admin(x_admin_token)
    res = raise_for_outcome(svc.doctors.save_doctor(req))
    return res.data


@router.put("", response_model=schemas.DoctorOut)
def update_doctor(
    req: schemas.DoctorUpdate,
    x_admin_token: str | None = Header(default=None),
    svc: Services = Depends(get_services),
):
    require_admin(x_admin_token)
    return raise_for_outcome(svc.doctors.update_doctor(req)).data


@router.delete("/{doctor_id}")
def delete_doctor(
    doctor_id: int,
    x_admin_token: str | None = Header(default=None),
    svc: Services = Depends(get_services),
):
    require_admin(x_admin_token)
    raise_for_outcome(svc.doctors.delete_doctor(doctor_id))
    return {"ok": True, "doctor_id": doctor_id}
