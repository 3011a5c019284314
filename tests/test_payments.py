from decimal import Decimal


def _messages(storage, user_id: int):
    return [n.message for n in storage.list_notifications_by_user(user_id)]


def test_landlord_creates_payment_and_tenant_is_notified(client, login_as, storage, portfolio):
    login_as(portfolio["landlord"])

    response = client.post(
        "/payments/",
        json={
            "tenant_id": portfolio["tenant"].id,
            "amount": "1200.00",
            "due_date": "2024-07-01T00:00:00Z",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert Decimal(data["amount"]) == Decimal("1200.00")
    assert _messages(storage, portfolio["tenant_user"].id) == ["New payment of $1200.00 due on 07/01/2024"]


def test_create_payment_for_foreign_tenant_is_forbidden(client, login_as, portfolio, create_user):
    login_as(create_user("other"))

    response = client.post(
        "/payments/",
        json={"tenant_id": portfolio["tenant"].id, "amount": "10.00", "due_date": "2024-07-01T00:00:00Z"},
    )

    assert response.status_code == 403


def test_landlord_lists_payments_with_tenant_detail(client, login_as, portfolio, create_payment):
    payment = create_payment(portfolio["tenant"].id)
    login_as(portfolio["landlord"])

    response = client.get("/payments/")

    assert response.status_code == 200
    rows = response.json()
    assert [r["id"] for r in rows] == [payment.id]
    assert rows[0]["tenant"]["user"]["username"] == "tenant"
    assert rows[0]["tenant"]["unit"]["property"]["name"] == "Maple Apartments"


def test_tenant_lists_own_payments(client, login_as, portfolio, create_payment, create_user):
    payment = create_payment(portfolio["tenant"].id)
    login_as(portfolio["tenant_user"])

    response = client.get("/payments/")

    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [payment.id]

    login_as(create_user("unlinked", "tenant"))
    assert client.get("/payments/").status_code == 404


def test_status_change_notifies_tenant_once(client, login_as, storage, portfolio, create_payment):
    payment = create_payment(portfolio["tenant"].id)
    login_as(portfolio["landlord"])

    changed = client.put(f"/payments/{payment.id}", json={"status": "overdue"})
    assert changed.status_code == 200
    assert changed.json()["status"] == "overdue"

    unchanged = client.put(f"/payments/{payment.id}", json={"status": "overdue", "notes": "Reminder sent"})
    assert unchanged.status_code == 200
    assert unchanged.json()["notes"] == "Reminder sent"

    assert _messages(storage, portfolio["tenant_user"].id) == ["Payment status updated to overdue for $1200.00"]


def test_status_change_message_uses_the_updated_amount(client, login_as, storage, portfolio, create_payment):
    payment = create_payment(portfolio["tenant"].id)
    login_as(portfolio["landlord"])

    response = client.put(f"/payments/{payment.id}", json={"status": "overdue", "amount": "1300.00"})

    assert response.status_code == 200
    assert _messages(storage, portfolio["tenant_user"].id) == ["Payment status updated to overdue for $1300.00"]


def test_update_payment_access_control(client, login_as, portfolio, create_payment, create_user):
    payment = create_payment(portfolio["tenant"].id)
    login_as(create_user("other"))

    assert client.put(f"/payments/{payment.id}", json={"status": "paid"}).status_code == 403
    assert client.put("/payments/999", json={"status": "paid"}).status_code == 404


def test_tenant_processes_payment(client, login_as, clock, storage, portfolio, create_payment):
    payment = create_payment(portfolio["tenant"].id)
    login_as(portfolio["tenant_user"])

    response = client.post(f"/payments/{payment.id}/process")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "paid"
    assert data["payment_method"] == "Credit Card"
    stored = storage.get_payment(payment.id)
    assert stored.payment_date == clock.now
    assert _messages(storage, portfolio["tenant_user"].id) == ["Payment of $1200.00 processed successfully"]
    assert _messages(storage, portfolio["landlord"].id) == ["Payment of $1200.00 received from tenant"]


def test_process_payment_with_explicit_method(client, login_as, storage, portfolio, create_payment):
    payment = create_payment(portfolio["tenant"].id)
    login_as(portfolio["tenant_user"])

    response = client.post(f"/payments/{payment.id}/process", json={"payment_method": "ACH"})

    assert response.status_code == 200
    assert storage.get_payment(payment.id).payment_method == "ACH"


def test_process_payment_access_control(client, login_as, portfolio, create_payment, create_user, create_tenant):
    payment = create_payment(portfolio["tenant"].id)
    intruder = create_user("intruder", "tenant")
    create_tenant(intruder.id, portfolio["spare_unit"].id)

    login_as(intruder)
    assert client.post(f"/payments/{payment.id}/process").status_code == 403
    assert client.post("/payments/999/process").status_code == 404

    login_as(portfolio["landlord"])
    assert client.post(f"/payments/{payment.id}/process").status_code == 403
