from fastapi import APIRouter, Depends, Header
from typing import Optional

from .. import schemas
from ..services.outcomes import Outcome
from .deps import Services, get_services, raise_for_outcome

router = APIRouter(prefix="/patients", tags=["patients"])

_BAD_CREDENTIAL = {Outcome.patient_not_found: (401, "Credenciales inválidas")}


@router.post("", status_code=201, response_model=schemas.PatientOut)
def register(req: schemas.PatientIn, svc: Services = Depends(get_services)):
    res = raise_for_outcome(
        svc.patients.register(req),
        {Outcome.conflict: (409, "Ya existe un paciente con ese correo o teléfono")},
    )
    return res.data


@router.get("/me", response_model=schemas.PatientOut)
def me(x_credential: Optional[str] = Header(default=None), svc: Services = Depends(get_services)):
    return raise_for_outcome(svc.patients.details(x_credential), _BAD_CREDENTIAL).data


@router.get("/me/appointments", response_model=schemas.AppointmentsResponse)
def my_appointments(
    condition: Optional[str] = None,
    doctor_name: Optional[str] = None,
    x_credential: Optional[str] = Header(default=None),
    svc: Services = Depends(get_services),
):
    """
    condition: "past" (ya atendidas) | "future" (programadas)
    """
    res = raise_for_outcome(
        svc.patients.appointments_for(x_credential, condition=condition, doctor_name=doctor_name),
        _BAD_CREDENTIAL,
    )
    return schemas.AppointmentsResponse(appointments=res.data)
