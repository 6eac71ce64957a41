from fastapi import APIRouter, Depends, Header, HTTPException
from typing import Optional

from .. import schemas
from ..services.outcomes import Outcome
from .deps import Services, get_services, raise_for_outcome

router = APIRouter(prefix="/prescriptions", tags=["prescriptions"])


@router.post("", status_code=201, response_model=schemas.PrescriptionOut)
def attach_prescription(
    req: schemas.PrescriptionIn,
    x_credential: Optional[str] = Header(default=None),
    svc: Services = Depends(get_services),
):
    res = raise_for_outcome(
        svc.prescriptions.attach(x_credential, req),
        {
            Outcome.doctor_not_found: (401, "Credenciales de doctor inválidas"),
            Outcome.not_found: (404, "Cita no encontrada"),
            Outcome.conflict: (409, "La cita ya tiene receta"),
        },
    )
    return res.data


@router.get("/{appointment_id}", response_model=schemas.PrescriptionOut)
def get_prescription(
    appointment_id: int,
    x_credential: Optional[str] = Header(default=None),
    svc: Services = Depends(get_services),
):
    if svc.identities.resolve_doctor(x_credential) is None:
        raise HTTPException(status_code=401, detail="Credenciales de doctor inválidas")
    return raise_for_outcome(svc.prescriptions.get(appointment_id)).data
