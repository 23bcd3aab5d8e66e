from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import customer_manager.models  # noqa: F401
from customer_manager.core.database import Base, build_engine, get_db
from customer_manager.core.errors import register_exception_handlers
from customer_manager.models.address import Address
from customer_manager.models.customer import Customer
from customer_manager.routers.addresses import customer_addresses_router
from customer_manager.routers.customers import router as customers_router

from fixtures_data import ANN_LEE, BOB_KHAN, HOME_ADDRESS, OFFICE_ADDRESS


def _build_client():
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(customers_router)
    app.include_router(customer_addresses_router)
    app.dependency_overrides[get_db] = lambda: db

    return TestClient(app), db


def test_create_customer_returns_new_id_and_echoes_fields():
    client, _db = _build_client()

    response = client.post("/api/customers", json=ANN_LEE)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Customer created successfully"
    assert isinstance(body["data"]["id"], int)
    assert body["data"]["id"] > 0
    assert {key: body["data"][key] for key in ANN_LEE} == ANN_LEE

    fetched = client.get(f"/api/customers/{body['data']['id']}")

    assert fetched.status_code == 200
    assert fetched.json() == {"message": "Success", "data": {"id": body["data"]["id"], **ANN_LEE}}


def test_create_customer_trims_whitespace():
    client, _db = _build_client()

    response = client.post(
        "/api/customers",
        json={"first_name": "  Ann ", "last_name": "Lee  ", "phone_number": " 1234567890 "},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["first_name"] == "Ann"
    assert data["last_name"] == "Lee"
    assert data["phone_number"] == "1234567890"


def test_create_customer_with_duplicate_phone_is_rejected_without_new_row():
    client, db = _build_client()
    client.post("/api/customers", json=ANN_LEE)

    response = client.post(
        "/api/customers",
        json={"first_name": "Other", "last_name": "Person", "phone_number": ANN_LEE["phone_number"]},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Phone number already exists"}
    assert db.query(Customer).count() == 1


def test_create_customer_requires_every_field():
    client, db = _build_client()

    response = client.post("/api/customers", json={"first_name": "Ann", "last_name": "", "phone_number": "1234567890"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "All fields are required"
    assert body["fields"] == {"last_name": "Last name is required"}
    assert db.query(Customer).count() == 0


def test_create_customer_without_body_reports_missing_fields():
    client, _db = _build_client()

    response = client.post("/api/customers")

    assert response.status_code == 400
    assert response.json()["error"] == "All fields are required"


def test_create_customer_rejects_malformed_phone_number():
    client, db = _build_client()

    response = client.post("/api/customers", json={**ANN_LEE, "phone_number": "12345"})

    assert response.status_code == 400
    assert response.json()["error"] == "Phone number must be 10 digits"
    assert db.query(Customer).count() == 0


def test_get_unknown_customer_returns_not_found():
    client, _db = _build_client()

    response = client.get("/api/customers/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found"}


def test_update_customer_replaces_all_fields():
    client, db = _build_client()
    customer_id = client.post("/api/customers", json=ANN_LEE).json()["data"]["id"]

    response = client.put(f"/api/customers/{customer_id}", json=BOB_KHAN)

    assert response.status_code == 200
    assert response.json() == {
        "message": "Customer updated successfully",
        "data": {"id": customer_id, **BOB_KHAN},
    }
    stored = db.query(Customer).filter(Customer.id == customer_id).one()
    db.refresh(stored)
    assert stored.first_name == "Bob"
    assert stored.phone_number == BOB_KHAN["phone_number"]


def test_update_customer_keeping_own_phone_is_allowed():
    client, _db = _build_client()
    customer_id = client.post("/api/customers", json=ANN_LEE).json()["data"]["id"]

    response = client.put(f"/api/customers/{customer_id}", json={**ANN_LEE, "first_name": "Annie"})

    assert response.status_code == 200
    assert response.json()["data"]["first_name"] == "Annie"


def test_update_customer_to_existing_phone_is_rejected():
    client, db = _build_client()
    client.post("/api/customers", json=ANN_LEE)
    bob_id = client.post("/api/customers", json=BOB_KHAN).json()["data"]["id"]

    response = client.put(f"/api/customers/{bob_id}", json={**BOB_KHAN, "phone_number": ANN_LEE["phone_number"]})

    assert response.status_code == 400
    assert response.json() == {"error": "Phone number already exists"}
    stored = db.query(Customer).filter(Customer.id == bob_id).one()
    assert stored.phone_number == BOB_KHAN["phone_number"]


def test_update_unknown_customer_returns_not_found():
    client, _db = _build_client()

    response = client.put("/api/customers/404", json=ANN_LEE)

    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found"}


def test_update_customer_requires_every_field():
    client, _db = _build_client()
    customer_id = client.post("/api/customers", json=ANN_LEE).json()["data"]["id"]

    response = client.put(f"/api/customers/{customer_id}", json={"first_name": "Ann"})

    assert response.status_code == 400
    assert response.json()["error"] == "All fields are required"


def test_delete_customer_then_lookup_returns_not_found():
    client, _db = _build_client()
    customer_id = client.post("/api/customers", json=ANN_LEE).json()["data"]["id"]

    deleted = client.delete(f"/api/customers/{customer_id}")
    fetched = client.get(f"/api/customers/{customer_id}")
    deleted_again = client.delete(f"/api/customers/{customer_id}")

    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Customer deleted successfully"}
    assert fetched.status_code == 404
    assert deleted_again.status_code == 404
    assert deleted_again.json() == {"error": "Customer not found"}


def test_delete_customer_cascades_to_its_addresses():
    client, db = _build_client()
    ann_id = client.post("/api/customers", json=ANN_LEE).json()["data"]["id"]
    bob_id = client.post("/api/customers", json=BOB_KHAN).json()["data"]["id"]
    client.post(f"/api/customers/{ann_id}/addresses", json=HOME_ADDRESS)
    client.post(f"/api/customers/{ann_id}/addresses", json=OFFICE_ADDRESS)
    client.post(f"/api/customers/{bob_id}/addresses", json=HOME_ADDRESS)

    response = client.delete(f"/api/customers/{ann_id}")

    assert response.status_code == 200
    assert db.query(Address).filter(Address.customer_id == ann_id).count() == 0
    assert db.query(Address).filter(Address.customer_id == bob_id).count() == 1


def test_ids_outside_integer_range_are_rejected_as_bad_requests():
    client, _db = _build_client()
    huge_id = 10**20

    responses = [
        client.get(f"/api/customers/{huge_id}"),
        client.put(f"/api/customers/{huge_id}", json=ANN_LEE),
        client.delete(f"/api/customers/{huge_id}"),
        client.get(f"/api/customers/{huge_id}/addresses"),
        client.get("/api/customers/0"),
    ]

    for response in responses:
        assert response.status_code == 400
        assert response.json()["error"].startswith("customer_id")
