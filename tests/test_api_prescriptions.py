import pytest

MEDICINES = [
    {
        "drug": "Paracetamol 500 mg",
        "dose": "1 tab",
        "frequency": "1-0-1",
        "day": "5",
        "remarks": "After food",
    },
    {
        "drug": "Cetirizine 10 mg",
        "dose": "1 tab",
        "frequency": "0-0-1",
        "day": "3",
    },
]


@pytest.fixture
def refs(make_doctor, make_patient):
    return make_patient().id, make_doctor().id


def _create(client, headers, patient_id, doctor_id, **kw):
    body = {
        "patient_id": patient_id,
        "doctor_id": doctor_id,
        "medicines": MEDICINES,
        "tests": ["CBC", "  "],
        "description": ["Viral fever"],
    }
    body.update(kw)
    return client.post("/api/prescriptions/", headers=headers, json=body)


def test_create_and_get(client, auth_headers, refs):
    patient_id, doctor_id = refs
    res = _create(client, auth_headers, patient_id, doctor_id)
    assert res.status_code == 201
    rx = res.json()

    assert [m["drug"] for m in rx["medicines"]] == [
        "Paracetamol 500 mg", "Cetirizine 10 mg"
    ]
    assert rx["medicines"][1]["remarks"] is None
    assert rx["tests"] == ["CBC"]
    assert rx["patient"]["name"] == "Ravi Kumar"
    assert rx["doctor"]["clinic_name"] == "Sunrise Clinic"

    again = client.get(f"/api/prescriptions/{rx['id']}", headers=auth_headers)
    assert again.json()["id"] == rx["id"]

    detail = client.get(f"/api/patients/{patient_id}", headers=auth_headers)
    assert [p["id"] for p in detail.json()["prescriptions"]] == [rx["id"]]


def test_create_requires_medicines(client, auth_headers, refs):
    res = _create(client, auth_headers, *refs, medicines=[])
    assert res.status_code == 422


def test_create_rejects_unknown_patient(client, auth_headers, refs):
    _, doctor_id = refs
    res = _create(client, auth_headers, 999, doctor_id)
    assert res.status_code == 400
    assert res.json()["error"]["msg"] == "Invalid patient_id"


def test_list_filters(client, auth_headers, refs, make_patient):
    patient_id, doctor_id = refs
    other = make_patient(name="Sita Devi").id
    _create(client, auth_headers, patient_id, doctor_id)
    _create(client, auth_headers, other, doctor_id)

    everything = client.get("/api/prescriptions/", headers=auth_headers)
    assert len(everything.json()) == 2

    res = client.get(f"/api/prescriptions/?patient_id={other}",
                     headers=auth_headers)
    assert [rx["patient"]["name"] for rx in res.json()] == ["Sita Devi"]

    res = client.get("/api/prescriptions/?doctor_id=999",
                     headers=auth_headers)
    assert res.json() == []


def test_update_replaces_medicines(client, auth_headers, refs):
    rx_id = _create(client, auth_headers, *refs).json()["id"]
    res = client.put(f"/api/prescriptions/{rx_id}",
                     headers=auth_headers,
                     json={
                         "medicines": [{
                             "drug": "Azithromycin 500 mg",
                             "dose": "1 tab",
                             "frequency": "1-0-0",
                             "day": "3",
                         }],
                         "description": ["Throat infection"],
                     })
    assert res.status_code == 200
    body = res.json()
    assert [m["drug"] for m in body["medicines"]] == ["Azithromycin 500 mg"]
    assert body["description"] == ["Throat infection"]
    assert body["tests"] == ["CBC"]


def test_delete(client, auth_headers, refs):
    rx_id = _create(client, auth_headers, *refs).json()["id"]
    assert client.delete(f"/api/prescriptions/{rx_id}",
                         headers=auth_headers).status_code == 200
    res = client.get(f"/api/prescriptions/{rx_id}", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["error"]["msg"] == "Prescription not found"


def test_dangling_patient_is_null_in_listing(client, auth_headers, refs):
    patient_id, doctor_id = refs
    rx_id = _create(client, auth_headers, patient_id, doctor_id).json()["id"]
    client.delete(f"/api/patients/{patient_id}", headers=auth_headers)

    res = client.get(f"/api/prescriptions/{rx_id}", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["patient"] is None
    assert res.json()["doctor"]["id"] == doctor_id


# ---------------- PDF ----------------
def test_pdf_download(client, auth_headers, refs):
    rx_id = _create(client, auth_headers, *refs).json()["id"]
    res = client.get(f"/api/prescriptions/{rx_id}/pdf", headers=auth_headers)

    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert res.headers["content-disposition"].startswith(
        'attachment; filename="ravi_kumar.pdf"')
    assert res.content.startswith(b"%PDF-")


def test_pdf_is_stable_across_requests(client, auth_headers, refs):
    rx_id = _create(client, auth_headers, *refs).json()["id"]
    first = client.get(f"/api/prescriptions/{rx_id}/pdf", headers=auth_headers)
    second = client.get(f"/api/prescriptions/{rx_id}/pdf",
                        headers=auth_headers)
    assert first.content == second.content


def test_pdf_unknown_prescription(client, auth_headers):
    res = client.get("/api/prescriptions/999/pdf", headers=auth_headers)
    assert res.status_code == 404
    assert res.json() == {
        "status": False,
        "data": None,
        "error": {"msg": "Prescription not found"},
    }


def test_pdf_dangling_patient(client, auth_headers, refs):
    patient_id, doctor_id = refs
    rx_id = _create(client, auth_headers, patient_id, doctor_id).json()["id"]
    client.delete(f"/api/patients/{patient_id}", headers=auth_headers)

    res = client.get(f"/api/prescriptions/{rx_id}/pdf", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["error"]["msg"] == "Patient not found"


def test_pdf_dangling_doctor(client, auth_headers, refs):
    patient_id, doctor_id = refs
    rx_id = _create(client, auth_headers, patient_id, doctor_id).json()["id"]
    client.delete(f"/api/doctors/{doctor_id}", headers=auth_headers)

    res = client.get(f"/api/prescriptions/{rx_id}/pdf", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["error"]["msg"] == "Doctor not found"


def test_pdf_requires_token(client, refs):
    res = client.get("/api/prescriptions/1/pdf")
    assert res.status_code == 401
    assert res.json()["error"]["msg"] == "Missing token"


@pytest.mark.parametrize("path", [
    f"/api/prescriptions/{10**30}/pdf",
    f"/api/prescriptions/{2**63}",
    f"/api/prescriptions/?patient_id={10**30}",
    f"/api/patients/{10**30}",
    f"/api/doctors/{2**63}",
])
def test_out_of_range_ids_are_rejected(client, auth_headers, path):
    res = client.get(path, headers=auth_headers)
    assert res.status_code == 422
    assert res.json()["error"]["msg"] == "Validation error"


def test_out_of_range_body_ids_are_rejected(client, auth_headers, refs):
    _, doctor_id = refs
    res = _create(client, auth_headers, 10**30, doctor_id)
    assert res.status_code == 422


def test_overlong_medicine_fields_are_rejected(client, auth_headers, refs):
    meds = [{**MEDICINES[0], "drug": "X" * 20000}]
    res = _create(client, auth_headers, *refs, medicines=meds)
    assert res.status_code == 422
