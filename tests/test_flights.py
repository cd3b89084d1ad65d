from datetime import datetime, timedelta

from skybook.services.audit_service import history
from conftest import flight_payload


def test_create_and_get_flight(client, create_flight):
    flight = create_flight()
    assert flight["flightNumber"] == "SB100"
    assert flight["price"] == 200
    assert flight["availableSeats"] == 2

    res = client.get(f"/api/v1/flights/{flight['id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"]["id"] == flight["id"]


def test_get_unknown_flight_is_404(client):
    res = client.get("/api/v1/flights/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Flight not found"}


def test_search_filters_by_city(client, create_flight):
    create_flight(flightNumber="A1", departureCity="Lisbon", arrivalCity="Berlin")
    create_flight(flightNumber="A2", departureCity="Lisbon", arrivalCity="Paris")
    create_flight(flightNumber="A3", departureCity="Madrid", arrivalCity="Paris")

    res = client.get("/api/v1/flights")
    assert res.json()["count"] == 3
    assert [f["flightNumber"] for f in res.json()["data"]] == ["A1", "A2", "A3"]

    res = client.get("/api/v1/flights", params={"departureCity": "Lisbon"})
    assert [f["flightNumber"] for f in res.json()["data"]] == ["A1", "A2"]

    res = client.get("/api/v1/flights", params={"departureCity": "Lisbon", "arrivalCity": "Paris"})
    body = res.json()
    assert body["count"] == 1
    assert body["data"][0]["flightNumber"] == "A2"


def test_search_by_departure_date_uses_local_calendar_day(client, create_flight):
    # naive timestamps are read in the server's local zone, same as the date filter
    create_flight(flightNumber="D0", departureTime="2030-05-01T00:00:00", arrivalTime="2030-05-01T02:00:00")
    create_flight(flightNumber="D1", departureTime="2030-05-01T12:00:00", arrivalTime="2030-05-01T14:00:00")
    create_flight(flightNumber="D2", departureTime="2030-05-01T23:59:00", arrivalTime="2030-05-02T01:00:00")
    create_flight(flightNumber="D3", departureTime="2030-05-02T00:00:00", arrivalTime="2030-05-02T02:00:00")

    res = client.get("/api/v1/flights", params={"departureDate": "2030-05-01"})
    assert [f["flightNumber"] for f in res.json()["data"]] == ["D0", "D1", "D2"]


def test_search_rejects_malformed_date(client):
    res = client.get("/api/v1/flights", params={"departureDate": "05/01/2030"})
    assert res.status_code == 400
    assert res.json()["error"] == "departureDate must be YYYY-MM-DD"


def test_create_requires_admin(client, user_headers):
    res = client.post("/api/v1/flights", json=flight_payload(), headers=user_headers)
    assert res.status_code == 401
    assert res.json()["success"] is False


def test_create_requires_token(client):
    res = client.post("/api/v1/flights", json=flight_payload())
    assert res.status_code == 401
    assert res.json()["error"] == "Not authorized to access this route"


def test_create_rejects_bad_token(client):
    res = client.post("/api/v1/flights", json=flight_payload(), headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401


def test_create_rejects_duplicate_flight_number(client, admin_headers, create_flight):
    create_flight(flightNumber="DUP1")
    res = client.post("/api/v1/flights", json=flight_payload(flightNumber=" DUP1 "), headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Duplicate flight number"


def test_create_reports_first_invalid_field(client, admin_headers):
    res = client.post("/api/v1/flights", json=flight_payload(price=0, availableSeats=-1), headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"].startswith("price:")

    body = flight_payload()
    del body["airline"]
    res = client.post("/api/v1/flights", json=body, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"].startswith("airline:")


def test_price_must_be_whole_cents(client, admin_headers, create_flight):
    res = client.post("/api/v1/flights", json=flight_payload(price=0.001), headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"].startswith("price:")
    assert client.get("/api/v1/flights").json()["count"] == 0

    flight = create_flight(price=99.99)
    assert flight["price"] == 99.99

    res = client.put(f"/api/v1/flights/{flight['id']}", json={"price": 0.004}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"].startswith("price:")
    assert client.get(f"/api/v1/flights/{flight['id']}").json()["data"]["price"] == 99.99


def test_malformed_json_body(client, admin_headers):
    res = client.post("/api/v1/flights", content=b'{"flightNumber": "SB1",',
                      headers={**admin_headers, "Content-Type": "application/json"})
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Malformed JSON body"}


def test_create_rejects_arrival_before_departure(client, admin_headers):
    departure = datetime(2030, 1, 1, 10, 0)
    body = flight_payload(
        departureTime=departure.isoformat(),
        arrivalTime=(departure - timedelta(hours=1)).isoformat(),
    )
    res = client.post("/api/v1/flights", json=body, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Arrival time must be after departure time"


def test_update_flight_revalidates_merged_record(client, admin_headers, create_flight):
    flight = create_flight()
    res = client.put(f"/api/v1/flights/{flight['id']}", json={"price": 250, "availableSeats": 10},
                     headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["data"]["price"] == 250
    assert res.json()["data"]["availableSeats"] == 10

    # moving arrival before the stored departure is caught after the merge
    res = client.put(f"/api/v1/flights/{flight['id']}", json={"arrivalTime": "2000-01-01T00:00:00+00:00"},
                     headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Arrival time must be after departure time"


def test_update_to_existing_flight_number_fails(client, admin_headers, create_flight):
    create_flight(flightNumber="X1")
    second = create_flight(flightNumber="X2")
    res = client.put(f"/api/v1/flights/{second['id']}", json={"flightNumber": "X1"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Duplicate flight number"


def test_update_unknown_flight_is_404(client, admin_headers):
    res = client.put("/api/v1/flights/missing", json={"price": 10}, headers=admin_headers)
    assert res.status_code == 404


def test_delete_flight(client, admin_headers, create_flight):
    flight = create_flight()
    res = client.delete(f"/api/v1/flights/{flight['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"success": True, "data": {}}

    assert client.get(f"/api/v1/flights/{flight['id']}").status_code == 404
    assert client.delete(f"/api/v1/flights/{flight['id']}", headers=admin_headers).status_code == 404


def test_unknown_route_uses_envelope(client):
    res = client.get("/api/v1/nowhere")
    assert res.status_code == 404
    assert res.json()["success"] is False


def test_flight_changes_are_audited(client, db, admin, admin_headers, create_flight):
    flight = create_flight(flightNumber="AU1")
    client.put(f"/api/v1/flights/{flight['id']}", json={"price": 300, "airline": "Other Air"}, headers=admin_headers)
    # rejected update leaves no trace
    client.put(f"/api/v1/flights/{flight['id']}", json={"arrivalTime": "2000-01-01T00:00:00+00:00"},
               headers=admin_headers)
    client.delete(f"/api/v1/flights/{flight['id']}", headers=admin_headers)

    trail = history(db, "flight", flight["id"])
    assert sorted(e["action"] for e in trail) == ["flight.create", "flight.delete", "flight.update"]
    assert all(e["actor"] == admin.id for e in trail)
    update = next(e for e in trail if e["action"] == "flight.update")
    assert update["details"] == {"fields": ["airline", "price"]}
    delete = next(e for e in trail if e["action"] == "flight.delete")
    assert delete["details"] == {"flightNumber": "AU1"}
