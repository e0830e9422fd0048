"""API tests for record endpoints and summaries."""

from datetime import datetime


def record_payload(**overrides):
    payload = {
        "description": "Groceries",
        "amount": 42.5,
        "type": "expense",
        "category": "Food & Dining",
        "date": "2024-03-15T10:00:00",
        "paymentMethod": "card",
        "tags": ["food", "food", " weekly "],
    }
    payload.update(overrides)
    return payload


async def test_create_and_get_record(client):
    response = await client.post("/records/", json=record_payload())
    assert response.status_code == 201
    created = response.json()
    assert created["amount"] == 42.5
    assert created["signedAmount"] == -42.5
    assert created["paymentMethod"] == "card"
    assert created["tags"] == ["food", "weekly"]
    assert created["isRecurring"] is False

    response = await client.get(f"/records/{created['id']}")
    assert response.status_code == 200
    assert response.json()["description"] == "Groceries"


async def test_create_record_validation(client):
    for bad in (
        {"amount": 0},
        {"amount": 0.001},
        {"amount": 10000000000},
        {"type": "transfer"},
        {"description": ""},
        {"category": "x" * 51},
        {"paymentMethod": "cheque"},
        {"notes": "n" * 501},
        {"isRecurring": True},
    ):
        response = await client.post("/records/", json=record_payload(**bad))
        assert response.status_code == 400, bad
        assert response.json()["message"] == "Validation failed"


async def test_missing_record(client):
    response = await client.get("/records/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "Record not found"}


async def test_list_records_filters_and_pages(client):
    for day, category in [(1, "Housing"), (5, "Food & Dining"), (9, "Fast Food"), (12, "Travel")]:
        await client.post("/records/", json=record_payload(
            category=category, date=f"2024-03-{day:02d}T09:00:00", description=f"Day {day}",
        ))

    response = await client.get("/records/", params={"limit": 3})
    body = response.json()
    assert body["total"] == 4
    assert body["totalPages"] == 2
    assert body["currentPage"] == 1
    assert [r["description"] for r in body["records"]] == ["Day 12", "Day 9", "Day 5"]

    response = await client.get("/records/", params={"category": "food"})
    assert {r["category"] for r in response.json()["records"]} == {"Food & Dining", "Fast Food"}

    response = await client.get(
        "/records/", params={"startDate": "2024-03-05T00:00:00", "endDate": "2024-03-09T09:00:00"}
    )
    assert response.json()["total"] == 2


async def test_update_and_delete_record(client):
    created = (await client.post("/records/", json=record_payload())).json()

    response = await client.put(f"/records/{created['id']}", json={"amount": 10, "type": "income"})
    assert response.status_code == 200
    assert response.json()["signedAmount"] == 10

    response = await client.delete(f"/records/{created['id']}")
    assert response.json() == {"message": "Record deleted successfully"}
    assert (await client.get(f"/records/{created['id']}")).status_code == 404


async def test_summaries(client):
    await client.post("/records/", json=record_payload(
        type="income", amount=5000, category="Salary", date="2024-03-05T00:00:00"))
    await client.post("/records/", json=record_payload(
        amount=1200, category="Housing", date="2024-03-10T00:00:00"))
    await client.post("/records/", json=record_payload(
        amount=500, category="Food & Dining", date="2024-03-15T00:00:00"))
    await client.post("/records/", json=record_payload(
        amount=70, category="Food & Dining", date="2024-04-01T00:00:00"))

    balance = (await client.get("/records/balance")).json()
    assert balance == {"income": 5000, "expense": 1770, "balance": 3230}

    summary = (await client.get("/records/monthly-summary", params={"year": 2024, "month": 3})).json()
    assert summary == {"income": 5000, "expense": 1700, "balance": 3300, "month": 3, "year": 2024}

    breakdown = (await client.get(
        "/records/category-breakdown", params={"year": 2024, "month": 3})).json()
    assert breakdown == [
        {"category": "Housing", "total": 1200, "count": 1},
        {"category": "Food & Dining", "total": 500, "count": 1},
    ]

    all_time = (await client.get("/records/category-breakdown")).json()
    assert all_time[1] == {"category": "Food & Dining", "total": 570, "count": 2}


async def test_monthly_summary_requires_valid_month(client):
    assert (await client.get("/records/monthly-summary", params={"year": 2024})).status_code == 400
    response = await client.get("/records/monthly-summary", params={"year": 2024, "month": 13})
    assert response.status_code == 400


async def test_overview(client):
    now = datetime.now()
    for amount in (10, 20, 30, 40, 50, 60):
        await client.post("/records/", json=record_payload(amount=amount, date=now.isoformat()))

    response = await client.get("/records/summary/overview", params={"year": now.year, "month": now.month})
    body = response.json()
    assert body["balance"]["expense"] == 210
    assert body["monthlySummary"]["expense"] == 210
    assert len(body["recentRecords"]) == 5
    assert body["categoryBreakdown"] == [{"category": "Food & Dining", "total": 210, "count": 6}]


async def test_import_endpoint(client):
    content = b"description,amount,type,category\nCoffee,3.20,expense,Food & Dining\n"

    response = await client.post("/records/import", files={"file": ("records.csv", content, "text/csv")})
    assert response.json()["success"] is True
    assert response.json()["imported"] == 1

    response = await client.post("/records/import", files={"file": ("records.txt", content, "text/plain")})
    assert response.json()["success"] is False


async def test_sub_cent_update_is_rejected(client):
    created = (await client.post("/records/", json=record_payload(amount=0.01))).json()
    assert created["amount"] == 0.01

    response = await client.put(f"/records/{created['id']}", json={"amount": 0.004})
    assert response.status_code == 400
    assert (await client.get(f"/records/{created['id']}")).json()["amount"] == 0.01
