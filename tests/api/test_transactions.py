"""
Tests for transaction API endpoints.
"""

import uuid
from decimal import Decimal

import pytest


INVOICE = {
    "document": {
        "document_number": "F-0001",
        "document_type": "Invoice",
        "document_date": "2020-01-15",
        "totals": [
            {"concept": "Sales", "total": "100.00", "credit_account_code": "4100"},
            {"concept": "VAT", "total": "13.00", "credit_account_code": "2200"},
            {"concept": "Total", "total": "113.00", "debit_account_code": "1200"},
        ],
    },
}

UNBALANCED = {
    "document": {
        "document_number": "F-0002",
        "document_type": "Invoice",
        "document_date": "2020-01-15",
        "totals": [
            {"concept": "Sales", "total": "100.00", "credit_account_code": "4100"},
            {"concept": "Total", "total": "90.00", "debit_account_code": "1200"},
        ],
    },
}


@pytest.fixture
def draft_id(client, module, chart, jan_2020):
    response = client.post("/transactions/from-document", json=INVOICE)
    assert response.status_code == 201
    return response.json()["id"]


class TestCreateFromDocument:

    def test_returns_unposted_transaction(self, client, module, chart, jan_2020):
        response = client.post("/transactions/from-document", json=INVOICE)
        assert response.status_code == 201

        data = response.json()
        assert data["is_posted"] is False
        assert data["transaction_number"] == ""
        assert data["description"] == "Document Invoice #F-0001"
        assert [e["account_code"] for e in data["entries"]] == ["4100", "2200", "1200"]
        assert all(e["ledger_entry_number"] == "" for e in data["entries"])

    def test_get_transaction(self, client, draft_id):
        response = client.get(f"/transactions/{draft_id}")
        assert response.status_code == 200
        assert response.json()["document_number"] == "F-0001"

    def test_unknown_transaction_returns_404(self, client):
        response = client.get(f"/transactions/{uuid.uuid4()}")
        assert response.status_code == 404


class TestPost:

    def test_post_assigns_numbers(self, client, draft_id):
        response = client.post(f"/transactions/{draft_id}/post")
        assert response.status_code == 200
        assert response.json() == {
            "transaction_id": draft_id,
            "transaction_number": "T0001S",
            "success": True,
        }

        data = client.get(f"/transactions/{draft_id}").json()
        assert data["is_posted"] is True
        assert [e["ledger_entry_number"] for e in data["entries"]] == [
            "LE0001", "LE0002", "LE0003",
        ]

    def test_post_twice_returns_same_number(self, client, draft_id):
        client.post(f"/transactions/{draft_id}/post")
        response = client.post(f"/transactions/{draft_id}/post")

        assert response.status_code == 200
        assert response.json()["transaction_number"] == "T0001S"

    def test_post_into_closed_period_returns_409(self, client, draft_id):
        client.post("/fiscal-periods/JAN-2020/close", json={"actor": "auditor"})

        response = client.post(f"/transactions/{draft_id}/post")
        assert response.status_code == 409
        assert "closed" in response.json()["detail"]

        data = client.get(f"/transactions/{draft_id}").json()
        assert data["is_posted"] is False

    def test_post_unbalanced_returns_400(self, client, module, chart, jan_2020):
        created = client.post("/transactions/from-document", json=UNBALANCED).json()

        validate = client.post(f"/transactions/{created['id']}/validate")
        assert validate.json()["success"] is False

        response = client.post(f"/transactions/{created['id']}/post")
        assert response.status_code == 400
        assert "does not balance" in response.json()["detail"]

    def test_post_to_unknown_account_returns_404(self, client, module, chart, jan_2020):
        document = {"document": {
            **INVOICE["document"],
            "document_number": "F-0003",
            "totals": [
                {"concept": "Misc", "total": "10.00", "credit_account_code": "4100"},
                {"concept": "Total", "total": "10.00", "debit_account_code": "9999"},
            ],
        }}
        created = client.post("/transactions/from-document", json=document).json()

        response = client.post(f"/transactions/{created['id']}/post")
        assert response.status_code == 404
        assert "9999" in response.json()["detail"]

    def test_post_without_period_returns_404(self, client, module, chart):
        created = client.post("/transactions/from-document", json=INVOICE).json()

        response = client.post(f"/transactions/{created['id']}/post")
        assert response.status_code == 404


class TestUnpost:

    def test_unpost_keeps_number(self, client, draft_id):
        client.post(f"/transactions/{draft_id}/post")

        response = client.post(f"/transactions/{draft_id}/unpost")
        assert response.status_code == 200
        assert response.json()["transaction_number"] == "T0001S"

        balance = client.get("/ledger/accounts/1200/balance?as_of=2020-01-31").json()
        assert Decimal(balance["balance"]) == Decimal("0")

    def test_validate_balanced_draft(self, client, draft_id):
        response = client.post(f"/transactions/{draft_id}/validate")
        assert response.json()["success"] is True
