# tests/test_doctor_api.py
from tests.payloads import doctor_payload

BASE = "/api/v1/doctors"


def _create(client, **overrides):
    response = client.post(BASE, json=doctor_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_create_then_fetch(doctor_client, publisher):
    payload = doctor_payload()
    created = _create(doctor_client)

    body = doctor_client.get(f"{BASE}/{created['id']}").json()
    for key, value in payload.items():
        assert body[key] == value, key
    assert publisher.events == [("doctor-events", f"DOCTOR_CREATED:{created['id']}")]


def test_is_available_defaults_to_true(doctor_client):
    payload = doctor_payload()
    del payload["isAvailable"]
    response = doctor_client.post(BASE, json=payload)
    assert response.status_code == 201
    assert response.json()["isAvailable"] is True


def test_experience_years_upper_bound(doctor_client):
    assert doctor_client.post(BASE, json=doctor_payload(experienceYears=51)).status_code == 400
    assert doctor_client.post(BASE, json=doctor_payload(experienceYears=50)).status_code == 201


def test_negative_fee_is_rejected(doctor_client):
    assert doctor_client.post(BASE, json=doctor_payload(consultationFee="-1.00")).status_code == 400


def test_consultation_fee_is_a_json_number(doctor_client):
    created = _create(doctor_client, consultationFee="180.25")
    assert created["consultationFee"] == 180.25
    fetched = doctor_client.get(f"{BASE}/{created['id']}").json()
    assert fetched["consultationFee"] == 180.25
    assert _create(doctor_client, licenseNumber="LIC-FREE", consultationFee=None)["consultationFee"] is None


def test_doctor_phone_digits_must_be_ascii(doctor_client):
    assert doctor_client.post(BASE, json=doctor_payload(phone="+1٤١٥٥٥٥")).status_code == 400


def test_duplicate_license_is_rejected(doctor_client, publisher):
    _create(doctor_client)
    response = doctor_client.post(BASE, json=doctor_payload(userId=2002, firstName="Lisa"))
    assert response.status_code == 400
    assert response.json() == {
        "detail": "Doctor with licenseNumber LIC-DIAG-0001 already exists",
        "field": "licenseNumber",
    }
    assert len(publisher.tokens()) == 1


def test_same_user_may_hold_two_profiles(doctor_client):
    _create(doctor_client, licenseNumber="LIC-1")
    _create(doctor_client, licenseNumber="LIC-2")
    assert doctor_client.get(f"{BASE}/exists/user/1001").json() is True


def test_get_by_user_returns_first_profile(doctor_client):
    first = _create(doctor_client, licenseNumber="LIC-1")
    _create(doctor_client, licenseNumber="LIC-2")
    assert doctor_client.get(f"{BASE}/user/1001").json()["id"] == first["id"]


def test_missing_doctor_returns_404(doctor_client):
    assert doctor_client.get(f"{BASE}/42").status_code == 404
    assert doctor_client.get(f"{BASE}/user/42").status_code == 404
    assert doctor_client.get(f"{BASE}/license/NOPE").status_code == 404
    assert doctor_client.put(f"{BASE}/42", json=doctor_payload()).status_code == 404
    assert doctor_client.delete(f"{BASE}/42").status_code == 404
    assert doctor_client.patch(f"{BASE}/42/availability", params={"available": "false"}).status_code == 404


def test_update_replaces_fields(doctor_client, publisher):
    created = _create(doctor_client)

    response = doctor_client.put(
        f"{BASE}/{created['id']}",
        json=doctor_payload(specialization="Nephrology", consultationFee="99.50", phone=None),
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["specialization"] == "Nephrology"
    assert updated["consultationFee"] == 99.5
    assert updated["phone"] is None
    assert updated["createdAt"] == created["createdAt"]
    assert publisher.tokens()[-1] == f"DOCTOR_UPDATED:{created['id']}"


def test_update_may_keep_own_license(doctor_client):
    created = _create(doctor_client)
    response = doctor_client.put(f"{BASE}/{created['id']}", json=doctor_payload(firstName="Greg"))
    assert response.status_code == 200


def test_update_to_license_of_another_doctor_is_rejected(doctor_client):
    _create(doctor_client, licenseNumber="LIC-1")
    other = _create(doctor_client, licenseNumber="LIC-2")

    response = doctor_client.put(f"{BASE}/{other['id']}", json=doctor_payload(licenseNumber="LIC-1"))
    assert response.status_code == 400
    assert response.json()["field"] == "licenseNumber"
    assert doctor_client.get(f"{BASE}/{other['id']}").json()["licenseNumber"] == "LIC-2"


def test_set_availability(doctor_client, publisher):
    created = _create(doctor_client)

    response = doctor_client.patch(f"{BASE}/{created['id']}/availability", params={"available": "false"})
    assert response.status_code == 200
    assert response.json()["isAvailable"] is False
    assert doctor_client.get(f"{BASE}/available").json() == []
    assert publisher.tokens()[-1] == f"DOCTOR_UPDATED:{created['id']}"


def test_filters(doctor_client):
    house = _create(doctor_client, licenseNumber="LIC-1", specialization="Diagnostic Medicine", departmentId=2,
                    experienceYears=30)
    cuddy = _create(doctor_client, licenseNumber="LIC-2", firstName="Lisa", lastName="Cuddy",
                    specialization="Endocrinology", departmentId=1, experienceYears=12, isAvailable=False)
    chase = _create(doctor_client, licenseNumber="LIC-3", firstName="Robert", lastName="Chase",
                    specialization="Intensive Care Medicine", departmentId=2, experienceYears=5)

    def ids(path, **params):
        return [d["id"] for d in doctor_client.get(f"{BASE}{path}", params=params).json()]

    assert ids("/specialization/medicine") == [house["id"], chase["id"]]
    assert ids("/department/2") == [house["id"], chase["id"]]
    assert ids("/available") == [house["id"], chase["id"]]
    assert ids("/search", name="CU") == [cuddy["id"]]
    assert ids("/experience-range", minYears=5, maxYears=12) == [cuddy["id"], chase["id"]]
    assert ids("/experience-range") == [house["id"], cuddy["id"], chase["id"]]


def test_inverted_experience_range_is_rejected(doctor_client):
    assert doctor_client.get(f"{BASE}/experience-range", params={"minYears": 10, "maxYears": 5}).status_code == 400
    assert doctor_client.get(f"{BASE}/experience-range", params={"maxYears": 51}).status_code == 400


def test_pagination(doctor_client):
    for i, fee in enumerate(["300.00", "100.00", "200.00"]):
        _create(doctor_client, licenseNumber=f"LIC-{i}", consultationFee=fee)

    page = doctor_client.get(BASE, params={"size": 2, "sortBy": "consultationFee"}).json()
    assert [d["consultationFee"] for d in page["content"]] == [100.0, 200.0]
    assert page["totalElements"] == 3
    assert page["totalPages"] == 2
    assert page["last"] is False

    assert doctor_client.get(BASE, params={"size": 0}).status_code == 400
    assert doctor_client.get(BASE, params={"page": -1}).status_code == 400


def test_statistics(doctor_client):
    assert doctor_client.get(f"{BASE}/statistics").json() == {
        "totalDoctors": 0,
        "availableDoctors": 0,
        "doctorsBySpecialization": {},
    }

    _create(doctor_client, licenseNumber="LIC-1", specialization="Cardiology")
    _create(doctor_client, licenseNumber="LIC-2", specialization="Cardiology", isAvailable=False)
    _create(doctor_client, licenseNumber="LIC-3", specialization=None)

    assert doctor_client.get(f"{BASE}/statistics").json() == {
        "totalDoctors": 3,
        "availableDoctors": 2,
        "doctorsBySpecialization": {"Cardiology": 2},
    }


def test_exists_by_license(doctor_client):
    _create(doctor_client)
    assert doctor_client.get(f"{BASE}/exists/license/LIC-DIAG-0001").json() is True
    assert doctor_client.get(f"{BASE}/exists/license/LIC-OTHER").json() is False


def test_delete_removes_doctor_and_schedules(doctor_client, publisher):
    doctor = _create(doctor_client)
    schedule = doctor_client.post(
        "/api/v1/schedules",
        json={"doctorId": doctor["id"], "dayOfWeek": "MONDAY", "startTime": "09:00", "endTime": "12:00"},
    ).json()

    assert doctor_client.delete(f"{BASE}/{doctor['id']}").status_code == 204
    assert doctor_client.get(f"{BASE}/{doctor['id']}").status_code == 404
    assert doctor_client.get(f"/api/v1/schedules/{schedule['id']}").status_code == 404
    assert doctor_client.get(f"/api/v1/schedules/doctor/{doctor['id']}").json() == []
    assert publisher.tokens()[-1] == f"DOCTOR_DELETED:{doctor['id']}"


def test_health(doctor_client):
    response = doctor_client.get(f"{BASE}/health")
    assert response.status_code == 200
    assert response.text == "Doctor Service is running"


def test_patient_routes_are_not_mounted_on_doctor_service(doctor_client):
    assert doctor_client.get("/api/v1/patients").status_code == 404
