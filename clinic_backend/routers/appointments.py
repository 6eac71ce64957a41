from fastapi import APIRouter, Depends, Header, HTTPException, Query
from typing import Optional

from .. import schemas
from ..services.outcomes import Outcome
from .deps import Services, get_services, parse_day, raise_for_outcome

router = APIRouter(prefix="", tags=["appointments"])

# Un doctor inexistente en el cuerpo es un error del cliente, no un 404 de la ruta
_BODY_DOCTOR = {Outcome.doctor_not_found: (400, "Doctor no encontrado")}


def _patient_or_401(svc: Services, credential: Optional[str]):
    patient = svc.identities.resolve_patient(credential)
    if patient is None:
        raise HTTPException(status_code=401, detail="Credenciales inválidas")
    return patient


@router.get("/doctors/{doctor_id}/availability", response_model=schemas.SlotsResponse)
def get_availability(
    doctor_id: int,
    date: str = Query(..., description="YYYY-MM-DD"),
    svc: Services = Depends(get_services),
):
    day = parse_day(date)
    res = raise_for_outcome(svc.availability.availability(doctor_id, day))
    return schemas.SlotsResponse(doctor_id=doctor_id, date=day.isoformat(), slots=res.data)


@router.get("/appointments", response_model=schemas.AppointmentsResponse)
def list_appointments(
    date: str = Query(..., description="YYYY-MM-DD"),
    patient_name: Optional[str] = None,
    x_credential: Optional[str] = Header(default=None),
    svc: Services = Depends(get_services),
):
    day = parse_day(date)
    res = raise_for_outcome(
        svc.lifecycle.list_for_doctor(x_credential, day, patient_name=patient_name),
        {Outcome.doctor_not_found: (401, "Credenciales de doctor inválidas")},
    )
    return schemas.AppointmentsResponse(appointments=res.data)


@router.post("/appointments", status_code=201, response_model=schemas.AppointmentSummary)
def book(
    req: schemas.AppointmentRequest,
    x_credential: Optional[str] = Header(default=None),
    svc: Services = Depends(get_services),
):
    patient = _patient_or_401(svc, x_credential)
    res = raise_for_outcome(svc.lifecycle.book(req.doctor_id, patient.id, req.appointment_time), _BODY_DOCTOR)
    return schemas.AppointmentSummary.from_appointment(res.data)


@router.put("/appointments/{appointment_id}", response_model=schemas.AppointmentSummary)
def reschedule(
    appointment_id: int,
    req: schemas.AppointmentRequest,
    x_credential: Optional[str] = Header(default=None),
    svc: Services = Depends(get_services),
):
    patient = _patient_or_401(svc, x_credential)
    res = raise_for_outcome(
        svc.lifecycle.update(appointment_id, patient.id, req.doctor_id, req.appointment_time),
        _BODY_DOCTOR,
    )
    return schemas.AppointmentSummary.from_appointment(res.data)


@router.delete("/appointments/{appointment_id}")
def cancel(
    appointment_id: int,
    x_credential: Optional[str] = Header(default=None),
    svc: Services = Depends(get_services),
):
    raise_for_outcome(svc.lifecycle.cancel(appointment_id, x_credential))
    return {"ok": True, "appointment_id": appointment_id, "message": "Cita cancelada"}
