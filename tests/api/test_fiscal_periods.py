"""
Tests for fiscal period API endpoints.
"""

JAN_2020 = {
    "code": "JAN-2020",
    "name": "Jan-2020",
    "start_date": "2020-01-01",
    "end_date": "2020-01-31",
    "actor": "controller",
}


class TestCreatePeriod:

    def test_create_period_returns_201(self, client):
        response = client.post("/fiscal-periods", json=JAN_2020)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "OPEN"
        assert data["inserted_by"] == "controller"

    def test_end_before_start_returns_422(self, client):
        response = client.post("/fiscal-periods", json={
            **JAN_2020, "start_date": "2020-02-01",
        })
        assert response.status_code == 422

    def test_overlap_returns_400(self, client):
        client.post("/fiscal-periods", json=JAN_2020)
        response = client.post("/fiscal-periods", json={
            **JAN_2020, "code": "MID", "start_date": "2020-01-15",
            "end_date": "2020-02-15",
        })
        assert response.status_code == 400


class TestOpenClose:

    def test_close_and_check(self, client):
        client.post("/fiscal-periods", json=JAN_2020)

        response = client.post(
            "/fiscal-periods/JAN-2020/close", json={"actor": "auditor"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "CLOSED"
        assert response.json()["updated_by"] == "auditor"

        check = client.get("/fiscal-periods/check?on=2020-01-15").json()
        assert check == {"checked_date": "2020-01-15", "is_open": False}

    def test_close_twice_succeeds(self, client):
        client.post("/fiscal-periods", json=JAN_2020)
        client.post("/fiscal-periods/JAN-2020/close", json={"actor": "auditor"})

        response = client.post(
            "/fiscal-periods/jan-2020/close", json={"actor": "auditor"}
        )
        assert response.status_code == 200

    def test_reopen(self, client):
        client.post("/fiscal-periods", json={**JAN_2020, "status": "CLOSED"})

        response = client.post(
            "/fiscal-periods/JAN-2020/open", json={"actor": "controller"}
        )
        assert response.json()["status"] == "OPEN"

    def test_unknown_period_returns_404(self, client):
        response = client.post(
            "/fiscal-periods/NOPE/close", json={"actor": "auditor"}
        )
        assert response.status_code == 404
        assert client.get("/fiscal-periods/NOPE").status_code == 404

    def test_list_by_status(self, client):
        client.post("/fiscal-periods", json=JAN_2020)
        client.post("/fiscal-periods", json={
            **JAN_2020, "code": "FEB-2020", "name": "Feb-2020",
            "start_date": "2020-02-01", "end_date": "2020-02-29",
            "status": "CLOSED",
        })

        assert len(client.get("/fiscal-periods").json()) == 2
        closed = client.get("/fiscal-periods?status=CLOSED").json()
        assert [p["code"] for p in closed] == ["FEB-2020"]
