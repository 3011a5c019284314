from decimal import Decimal


def test_dashboard_summary_for_landlord(client, login_as, portfolio, create_payment):
    create_payment(portfolio["tenant"].id, amount="1200.00")
    login_as(portfolio["landlord"])

    response = client.get("/dashboard")

    assert response.status_code == 200
    data = response.json()
    assert data["properties_count"] == 1
    assert data["tenants_count"] == 1
    assert Decimal(data["upcoming_payments_total"]) == Decimal("1200.00")
    assert Decimal(data["overdue_payments_total"]) == Decimal("0")
    assert data["properties"][0]["units"][0]["id"] == portfolio["unit"].id
    assert data["tenant_activity"][0]["tenant"]["user"]["username"] == "tenant"
    assert [m["month"] for m in data["monthly_income"]][-1] == "June '24"


def test_dashboard_requires_landlord(client, login_as, portfolio):
    login_as(portfolio["tenant_user"])
    assert client.get("/dashboard").status_code == 403


def test_tenant_portal(client, login_as, storage, portfolio, create_payment):
    payment = create_payment(portfolio["tenant"].id)
    storage.create_notification({"user_id": portfolio["tenant_user"].id, "message": "Welcome home"})
    login_as(portfolio["tenant_user"])

    response = client.get("/tenant-portal")

    assert response.status_code == 200
    data = response.json()
    assert data["tenant"]["id"] == portfolio["tenant"].id
    assert data["unit"]["id"] == portfolio["unit"].id
    assert data["property"]["name"] == "Maple Apartments"
    assert [p["id"] for p in data["payments"]] == [payment.id]
    assert [n["message"] for n in data["notifications"]] == ["Welcome home"]
    assert data["landlord"] == {
        "id": portfolio["landlord"].id,
        "first_name": "Landlord",
        "last_name": "Tester",
        "email": "landlord@example.com",
        "phone": "555-0100",
    }


def test_tenant_portal_without_profile(client, login_as, create_user):
    login_as(create_user("drifter", "tenant"))
    response = client.get("/tenant-portal")
    assert response.status_code == 404
    assert response.json()["detail"] == "Tenant profile not found"


def test_tenant_portal_requires_tenant(client, login_as, portfolio):
    login_as(portfolio["landlord"])
    assert client.get("/tenant-portal").status_code == 403
