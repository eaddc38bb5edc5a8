# rxdesk/api/routes_prescriptions.py
import io
import logging
from urllib.parse import quote
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi import Path as FPath
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session, selectinload

from rxdesk.api.deps import get_db, current_doctor
from rxdesk.db.base import MAX_ID
from rxdesk.models import Doctor, Patient, Prescription, PrescriptionMedicine
from rxdesk.schemas.common import MessageOut
from rxdesk.schemas.doctor import DoctorOut
from rxdesk.schemas.patient import PatientOut
from rxdesk.schemas.prescription import (PrescriptionCreate,
                                         PrescriptionUpdate, MedicineIn)
from rxdesk.schemas.prescription_detail import PrescriptionOut
from rxdesk.services.entity_store import SqlEntityStore
from rxdesk.services.pdf_prescription import render_prescription_document
from rxdesk.services.pdfs.writer import PDF_MEDIA_TYPE

router = APIRouter()
logger = logging.getLogger(__name__)


def _medicine_rows(items: List[MedicineIn]) -> List[PrescriptionMedicine]:
    return [
        PrescriptionMedicine(
            position=i,
            drug=m.drug.strip(),
            dose=m.dose.strip(),
            frequency=m.frequency.strip(),
            day=m.day.strip(),
            remarks=(m.remarks or "").strip() or None,
        ) for i, m in enumerate(items)
    ]


def _check_refs(db: Session, patient_id: Optional[int],
                doctor_id: Optional[int]) -> None:
    if patient_id is not None and not db.get(Patient, patient_id):
        raise HTTPException(status_code=400, detail="Invalid patient_id")
    if doctor_id is not None and not db.get(Doctor, doctor_id):
        raise HTTPException(status_code=400, detail="Invalid doctor_id")


def _out(db: Session, rx: Prescription) -> PrescriptionOut:
    out = PrescriptionOut.model_validate(rx)
    patient = db.get(Patient, rx.patient_id)
    doctor = db.get(Doctor, rx.doctor_id)
    return out.model_copy(
        update={
            "patient": PatientOut.model_validate(patient) if patient else None,
            "doctor": DoctorOut.model_validate(doctor) if doctor else None,
        })


def _attachment(filename: str) -> str:
    ascii_name = filename.encode("ascii", "ignore").decode().replace('"', "")
    if ascii_name.startswith("."):
        ascii_name = "prescription.pdf"
    return (f'attachment; filename="{ascii_name}"; '
            f"filename*=UTF-8''{quote(filename)}")


def _get_rx_or_404(db: Session, prescription_id: int) -> Prescription:
    rx = (db.query(Prescription).options(selectinload(
        Prescription.medicines)).filter(
            Prescription.id == prescription_id).first())
    if not rx:
        raise HTTPException(status_code=404, detail="Prescription not found")
    return rx


@router.get("/", response_model=List[PrescriptionOut])
def list_prescriptions(
        doctor_id: Optional[int] = Query(None, gt=0, le=MAX_ID),
        patient_id: Optional[int] = Query(None, gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    qry = db.query(Prescription).options(selectinload(Prescription.medicines))
    if doctor_id is not None:
        qry = qry.filter(Prescription.doctor_id == doctor_id)
    if patient_id is not None:
        qry = qry.filter(Prescription.patient_id == patient_id)
    return [_out(db, rx) for rx in qry.order_by(Prescription.id.asc()).all()]


@router.get("/{prescription_id}", response_model=PrescriptionOut)
def get_prescription(
        prescription_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    return _out(db, _get_rx_or_404(db, prescription_id))


@router.post("/", response_model=PrescriptionOut, status_code=201)
def create_prescription(
        payload: PrescriptionCreate,
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    _check_refs(db, payload.patient_id, payload.doctor_id)

    rx = Prescription(
        patient_id=payload.patient_id,
        doctor_id=payload.doctor_id,
        tests=[t.strip() for t in payload.tests if t and t.strip()],
        description=list(payload.description),
        medicines=_medicine_rows(payload.medicines),
    )
    db.add(rx)
    db.commit()
    return _out(db, _get_rx_or_404(db, rx.id))


@router.put("/{prescription_id}", response_model=PrescriptionOut)
def update_prescription(
        payload: PrescriptionUpdate,
        prescription_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    rx = _get_rx_or_404(db, prescription_id)
    data = payload.model_dump(exclude_unset=True)
    _check_refs(db, data.get("patient_id"), data.get("doctor_id"))

    if data.get("patient_id") is not None:
        rx.patient_id = data["patient_id"]
    if data.get("doctor_id") is not None:
        rx.doctor_id = data["doctor_id"]
    if payload.medicines is not None:
        rx.medicines = _medicine_rows(payload.medicines)
    if payload.tests is not None:
        rx.tests = [t.strip() for t in payload.tests if t and t.strip()]
    if payload.description is not None:
        rx.description = list(payload.description)

    db.commit()
    db.expire_all()
    return _out(db, _get_rx_or_404(db, prescription_id))


@router.delete("/{prescription_id}", response_model=MessageOut)
def delete_prescription(
        prescription_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    rx = _get_rx_or_404(db, prescription_id)
    db.delete(rx)
    db.commit()
    return {"message": "Prescription deleted successfully"}


# ---------------------------------------------------------
# Prescription PDF
# ---------------------------------------------------------
@router.get("/{prescription_id}/pdf", response_class=StreamingResponse)
def download_prescription_pdf(
        prescription_id: int = FPath(..., gt=0, le=MAX_ID),
        db: Session = Depends(get_db),
        me: Doctor = Depends(current_doctor),
):
    # NotFoundError -> 404 via the registered handler, anything else -> 500
    pdf_bytes, filename = render_prescription_document(
        SqlEntityStore(db), prescription_id)
    logger.info("Rendered prescription %s (%d bytes)", prescription_id,
                len(pdf_bytes))

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": _attachment(filename)},
    )
