PATIENT = {
    "name": "Ravi Kumar",
    "age": 42,
    "sex": "male",
    "phone": "9111111111",
    "address_line1": "4 Lake View",
    "pincode": "560002",
    "height": "170",
    "weight": "70",
}


def _me(client, auth_headers):
    return client.get("/api/doctors/", headers=auth_headers).json()[0]


# ---------------- doctors ----------------
def test_update_doctor_clinic_details(client, auth_headers):
    me = _me(client, auth_headers)
    res = client.put(f"/api/doctors/{me['id']}",
                     headers=auth_headers,
                     json={
                         "clinic_name": "Sunrise Clinic",
                         "clinic_city": "Pune"
                     })
    assert res.status_code == 200
    body = res.json()
    assert body["clinic_name"] == "Sunrise Clinic"
    assert body["clinic_city"] == "Pune"
    assert body["doctor_name"] == "Asha Rao"


def test_update_doctor_password_allows_new_login(client, auth_headers):
    me = _me(client, auth_headers)
    client.put(f"/api/doctors/{me['id']}",
               headers=auth_headers,
               json={"password": "changed"})
    res = client.post("/api/auth/login",
                      json={
                          "email": "asha@example.com",
                          "password": "changed"
                      })
    assert res.status_code == 200


def test_missing_doctor_404(client, auth_headers):
    res = client.get("/api/doctors/999", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["error"]["msg"] == "Doctor not found"


def test_add_patient_to_doctor_is_idempotent(client, auth_headers):
    me = _me(client, auth_headers)
    pid = client.post("/api/patients/", headers=auth_headers,
                      json=PATIENT).json()["id"]

    for _ in range(2):
        res = client.put(f"/api/doctors/{me['id']}/patients",
                         headers=auth_headers,
                         json={"patient_id": pid})
        assert res.status_code == 200
    assert [p["id"] for p in res.json()["patients"]] == [pid]


def test_add_unknown_patient_to_doctor(client, auth_headers):
    me = _me(client, auth_headers)
    res = client.put(f"/api/doctors/{me['id']}/patients",
                     headers=auth_headers,
                     json={"patient_id": 404})
    assert res.status_code == 404


def test_upload_signature(client, auth_headers, storage_dir, signature_png):
    me = _me(client, auth_headers)
    png = (storage_dir / signature_png).read_bytes()
    res = client.post(f"/api/doctors/{me['id']}/signature",
                      headers=auth_headers,
                      files={"file": ("sig.png", png, "image/png")})
    assert res.status_code == 200
    ref = res.json()["signature"]
    assert ref.startswith("signatures/")
    assert (storage_dir / ref).read_bytes() == png


def test_upload_signature_rejects_non_image(client, auth_headers):
    me = _me(client, auth_headers)
    res = client.post(f"/api/doctors/{me['id']}/signature",
                      headers=auth_headers,
                      files={"file": ("notes.txt", b"hello", "text/plain")})
    assert res.status_code == 400


def test_delete_doctor(client, auth_headers, make_doctor):
    other = make_doctor()
    res = client.delete(f"/api/doctors/{other.id}", headers=auth_headers)
    assert res.status_code == 200
    assert client.get(f"/api/doctors/{other.id}",
                      headers=auth_headers).status_code == 404


# ---------------- patients ----------------
def test_patient_crud(client, auth_headers):
    res = client.post("/api/patients/", headers=auth_headers, json=PATIENT)
    assert res.status_code == 201
    pid = res.json()["id"]

    res = client.put(f"/api/patients/{pid}",
                     headers=auth_headers,
                     json={
                         "weight": "72",
                         "medical_history": ["asthma"]
                     })
    assert res.status_code == 200
    assert res.json()["weight"] == "72"
    assert res.json()["medical_history"] == ["asthma"]
    assert res.json()["name"] == "Ravi Kumar"

    res = client.get(f"/api/patients/{pid}", headers=auth_headers)
    assert res.json()["prescriptions"] == []

    assert client.delete(f"/api/patients/{pid}",
                         headers=auth_headers).status_code == 200
    assert client.get(f"/api/patients/{pid}",
                      headers=auth_headers).status_code == 404


def test_patient_requires_positive_age(client, auth_headers):
    res = client.post("/api/patients/",
                      headers=auth_headers,
                      json={
                          **PATIENT, "age": 0
                      })
    assert res.status_code == 422


def test_patient_update_cannot_blank_required(client, auth_headers):
    pid = client.post("/api/patients/", headers=auth_headers,
                      json=PATIENT).json()["id"]
    res = client.put(f"/api/patients/{pid}",
                     headers=auth_headers,
                     json={"name": ""})
    assert res.status_code == 400


def test_list_patients_by_parent(client, auth_headers):
    me = _me(client, auth_headers)
    client.post("/api/patients/",
                headers=auth_headers,
                json={
                    **PATIENT, "parent_id": me["id"]
                })
    client.post("/api/patients/",
                headers=auth_headers,
                json={
                    **PATIENT, "name": "Other"
                })

    everyone = client.get("/api/patients/", headers=auth_headers).json()
    mine = client.get(f"/api/patients/?parent_id={me['id']}",
                      headers=auth_headers).json()
    assert len(everyone) == 2
    assert [p["name"] for p in mine] == ["Ravi Kumar"]


# ---------------- reference vocabulary ----------------
def test_misc_create_list_delete(client, auth_headers):
    res = client.post("/api/misc/",
                      headers=auth_headers,
                      json={
                          "name": "Paracetamol",
                          "type": "drug"
                      })
    assert res.status_code == 201
    item_id = res.json()["id"]

    dup = client.post("/api/misc/",
                      headers=auth_headers,
                      json={
                          "name": "paracetamol",
                          "type": "drug"
                      })
    assert dup.status_code == 400

    client.post("/api/misc/",
                headers=auth_headers,
                json={
                    "name": "CBC",
                    "type": "test"
                })
    drugs = client.get("/api/misc/?type=drug", headers=auth_headers).json()
    assert [d["name"] for d in drugs] == ["Paracetamol"]

    assert client.delete(f"/api/misc/{item_id}",
                         headers=auth_headers).status_code == 200
    assert client.get("/api/misc/?type=drug",
                      headers=auth_headers).json() == []


def test_misc_rejects_unknown_type(client, auth_headers):
    res = client.post("/api/misc/",
                      headers=auth_headers,
                      json={
                          "name": "x",
                          "type": "surgery"
                      })
    assert res.status_code == 422


def test_misc_bulk_import_skips_duplicates(client, auth_headers):
    client.post("/api/misc/",
                headers=auth_headers,
                json={
                    "name": "1-0-1",
                    "type": "frequency"
                })
    res = client.post("/api/misc/bulk",
                      headers=auth_headers,
                      json={
                          "items": [
                              {"name": "1-0-1", "type": "frequency"},
                              {"name": "1-1-1", "type": "frequency"},
                              {"name": "  ", "type": "frequency"},
                              {"name": "1-1-1", "type": "frequency"},
                              {"name": "1-1-1", "type": "dose"},
                          ]
                      })
    assert res.status_code == 201
    body = res.json()
    assert body["inserted"] == 2
    assert [(s["row"], s["reason"]) for s in body["skipped"]] == [
        (1, "duplicate"),
        (3, "blank name"),
        (4, "duplicate"),
    ]
    freqs = client.get("/api/misc/?type=frequency",
                       headers=auth_headers).json()
    assert [f["name"] for f in freqs] == ["1-0-1", "1-1-1"]
