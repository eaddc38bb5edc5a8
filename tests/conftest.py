import os
import tempfile

# must be set before rxdesk.core.config is imported
_STORAGE = tempfile.mkdtemp(prefix="rxdesk-test-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_DIR"] = _STORAGE
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["AUTO_CREATE_TABLES"] = "true"

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from rxdesk.core.security import hash_password
from rxdesk.db.base import Base
from rxdesk.db.session import SessionLocal, engine
from rxdesk.main import app
from rxdesk.models import Doctor, Patient, Prescription, PrescriptionMedicine
from rxdesk.services.render_model import (
    ClinicView,
    MedicineLine,
    PatientView,
    PractitionerView,
    RenderModel,
)
from rxdesk.services.vitals import compute_bmi


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def storage_dir() -> Path:
    return Path(_STORAGE)


@pytest.fixture
def signature_png(storage_dir):
    """A real PNG under STORAGE_DIR; returns its storage-relative ref."""
    rel = Path("signatures") / "test" / "sig.png"
    path = storage_dir / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (120, 40), "white").save(path)
    return rel.as_posix()


@pytest.fixture
def auth_headers(client):
    client.post("/api/auth/signup",
                json={
                    "doctor_name": "Asha Rao",
                    "email": "asha@example.com",
                    "phone_no": "9876543210",
                    "password": "s3cret",
                })
    res = client.post("/api/auth/login",
                      json={
                          "email": "asha@example.com",
                          "password": "s3cret"
                      })
    token = res.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_doctor(db):

    def _make(**kw):
        data = dict(
            doctor_name="Dr. Meera Iyer",
            email=f"meera{db.query(Doctor).count()}@example.com",
            phone_no="9000000001",
            password_hash=hash_password("pw"),
            clinic_name="Sunrise Clinic",
            clinic_address_line1="12 MG Road",
            clinic_city="Bengaluru",
            clinic_state="Karnataka",
            clinic_pincode="560001",
        )
        data.update(kw)
        d = Doctor(**data)
        db.add(d)
        db.commit()
        db.refresh(d)
        return d

    return _make


@pytest.fixture
def make_patient(db):

    def _make(**kw):
        data = dict(
            name="Ravi Kumar",
            age=42,
            sex="male",
            phone="9111111111",
            address_line1="4 Lake View",
            pincode="560002",
            height="170",
            weight="70",
            pulse="72",
            bp="120/80",
        )
        data.update(kw)
        p = Patient(**data)
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make


@pytest.fixture
def make_prescription(db):

    def _make(patient_id, doctor_id, medicines=None, **kw):
        medicines = medicines if medicines is not None else [
            dict(drug="Paracetamol 500 mg",
                 dose="1 tab",
                 frequency="1-0-1",
                 day="5",
                 remarks="After food"),
            dict(drug="Cetirizine 10 mg",
                 dose="1 tab",
                 frequency="0-0-1",
                 day="3"),
        ]
        rx = Prescription(
            patient_id=patient_id,
            doctor_id=doctor_id,
            tests=kw.pop("tests", ["CBC"]),
            description=kw.pop("description", ["Viral fever", "Mild cough"]),
            medicines=[
                PrescriptionMedicine(position=i, **m)
                for i, m in enumerate(medicines)
            ],
        )
        db.add(rx)
        db.commit()
        db.refresh(rx)
        return rx

    return _make


@pytest.fixture
def build_model():

    def _build(**kw):
        patient = kw.pop("patient", None) or PatientView(
            name="Ravi Kumar",
            age=42,
            sex="male",
            phone="9111111111",
            address_line1="4 Lake View",
            height="170",
            weight="70",
            pulse="72",
            blood_pressure="120/80",
            bmi=compute_bmi("170", "70"),
        )
        data = dict(
            clinic=ClinicView(name="Sunrise Clinic",
                              address_line1="12 MG Road",
                              city="Bengaluru",
                              state="Karnataka",
                              pincode="560001"),
            practitioner=PractitionerView(display_name="Dr. Meera Iyer",
                                          email="meera@example.com",
                                          phone="9000000001"),
            patient=patient,
            diagnosis=("Viral fever", "Mild cough"),
            medicine_lines=(
                MedicineLine("Paracetamol 500 mg", "1 tab", "1-0-1", "5",
                             "After food"),
                MedicineLine("Cetirizine 10 mg", "1 tab", "0-0-1", "3"),
            ),
            test_lines=(),
        )
        data.update(kw)
        return RenderModel(**data)

    return _build
