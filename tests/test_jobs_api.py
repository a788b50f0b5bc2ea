"""Tests for the jobs API routes."""


def _create(client, **body):
    response = client.post("/api/jobs", json=body)
    assert response.status_code == 201
    return response.json()["data"]


def _worker(client, worker_id):
    return client.get(f"/api/workers/{worker_id}").json()["data"]


class TestCreateAndList:
    def test_create_job(self, client):
        response = client.post(
            "/api/jobs",
            json={
                "title": "AC repair",
                "serviceType": "electronics",
                "customerName": "Asha",
                "amount": "₹800",
                "location": "MG Road",
                "locationCoords": {"lat": 12.97, "lng": 77.59},
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        job = body["data"]
        assert job["id"].startswith("JOB")
        assert job["status"] == "available"
        assert job["assignedWorkerId"] is None
        assert job["serviceType"] == "electronics"
        assert job["serviceName"] == "Service"
        assert job["locationCoords"] == {"lat": 12.97, "lng": 77.59}
        assert isinstance(job["createdAt"], int)

    def test_numeric_amount_is_stored_as_text(self, client):
        assert _create(client, amount=800)["amount"] == "800"

    def test_client_id_and_duplicate(self, client):
        assert _create(client, id="JOB-abc")["id"] == "JOB-abc"
        response = client.post("/api/jobs", json={"id": "JOB-abc"})
        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_list_defaults_to_available_newest_first(self, client):
        first = _create(client, title="first")
        second = _create(client, title="second")
        taken = _create(client, title="taken")
        client.post(f"/api/jobs/{taken['id']}/accept", json={"workerId": "W1"})

        body = client.get("/api/jobs").json()
        assert body["count"] == 2
        assert [j["id"] for j in body["data"]] == [second["id"], first["id"]]

        inserted = client.get("/api/jobs", params={"order": "inserted"}).json()["data"]
        assert [j["id"] for j in inserted] == [first["id"], second["id"]]

    def test_list_by_former_worker(self, client):
        job = _create(client)
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W1"})
        client.post(f"/api/jobs/{job['id']}/reject")
        mine = client.get("/api/jobs", params={"workerId": "W1"}).json()
        assert [j["id"] for j in mine["data"]] == [job["id"]]
        assert mine["data"][0]["workerHistory"] == ["W1"]

    def test_list_all_and_by_worker(self, client):
        a = _create(client)
        _create(client)
        client.post(f"/api/jobs/{a['id']}/accept", json={"workerId": "W1"})

        assert client.get("/api/jobs", params={"status": "all"}).json()["count"] == 2
        mine = client.get("/api/jobs", params={"status": "all", "workerId": "W1"}).json()
        assert [j["id"] for j in mine["data"]] == [a["id"]]

    def test_get_job(self, client):
        job = _create(client)
        assert client.get(f"/api/jobs/{job['id']}").json()["data"]["id"] == job["id"]
        response = client.get("/api/jobs/missing")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Job not found"}


class TestTransitions:
    def test_accept_then_second_accept_conflicts(self, client):
        job = _create(client)
        ok = client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "X"})
        assert ok.status_code == 200
        assert ok.json()["data"]["assignedWorkerId"] == "X"

        clash = client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "Y"})
        assert clash.status_code == 409
        assert clash.json()["success"] is False
        assert "not available" in clash.json()["error"]
        assert client.get(f"/api/jobs/{job['id']}").json()["data"]["assignedWorkerId"] == "X"

    def test_accept_via_put(self, client):
        job = _create(client)
        response = client.put(f"/api/jobs/{job['id']}/accept", json={"workerId": "X"})
        assert response.json()["data"]["status"] == "accepted"

    def test_accept_without_worker(self, client):
        job = _create(client)
        response = client.post(f"/api/jobs/{job['id']}/accept", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "workerId is required"
        assert client.post(f"/api/jobs/{job['id']}/accept").status_code == 400

    def test_accept_missing_job(self, client):
        assert client.post("/api/jobs/missing/accept", json={"workerId": "X"}).status_code == 404

    def test_reject(self, client):
        job = _create(client)
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "X"})
        released = client.post(f"/api/jobs/{job['id']}/reject").json()["data"]
        assert released["status"] == "available"
        assert released["assignedWorkerId"] is None

    def test_complete_by_other_worker_forbidden(self, client):
        job = _create(client)
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "X"})
        response = client.post(f"/api/jobs/{job['id']}/complete", json={"workerId": "Y"})
        assert response.status_code == 403
        assert client.get(f"/api/jobs/{job['id']}").json()["data"]["status"] == "accepted"

    def test_complete_returns_earnings(self, client):
        _worker(client, "W")
        job = _create(client, amount="₹500 - ₹1500")
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W"})
        body = client.post(
            f"/api/jobs/{job['id']}/complete",
            json={"workerId": "W", "timeSpent": 3600, "location": {"lat": 1.0, "lng": 2.0}, "photo": "sha:ff"},
        ).json()
        assert body["earnings"] == 500
        assert body["data"]["earnings"] == 500
        assert body["data"]["timeSpent"] == 3600
        assert body["data"]["completionLocation"] == {"lat": 1.0, "lng": 2.0}
        assert body["data"]["completionPhoto"] == "sha:ff"

    def test_explicit_earnings(self, client):
        job = _create(client, amount="₹800")
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W"})
        body = client.post(f"/api/jobs/{job['id']}/complete", json={"workerId": "W", "earnings": 950}).json()
        assert body["earnings"] == 950

    def test_oversized_amount_completes_with_fallback(self, client):
        _worker(client, "W")
        job = _create(client, amount="₹" + "9" * 400)
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W"})
        response = client.post(f"/api/jobs/{job['id']}/complete", json={"workerId": "W"})
        assert response.status_code == 200
        assert response.json()["earnings"] == 500
        assert _worker(client, "W")["totalEarnings"] == 500
        assert client.get("/api/jobs", params={"status": "all"}).status_code == 200

    def test_negative_earnings_rejected(self, client):
        _worker(client, "W")
        job = _create(client, amount="₹800")
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W"})
        response = client.post(f"/api/jobs/{job['id']}/complete", json={"workerId": "W", "earnings": -1000})
        assert response.status_code == 422
        assert response.json()["success"] is False
        assert _worker(client, "W")["totalEarnings"] == 0
        assert client.get(f"/api/jobs/{job['id']}").json()["data"]["status"] == "accepted"

    def test_non_finite_earnings_rejected(self, client):
        _worker(client, "W")
        job = _create(client, amount="₹800")
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W"})
        for literal in ("NaN", "Infinity"):
            response = client.post(
                f"/api/jobs/{job['id']}/complete",
                content='{"workerId": "W", "earnings": ' + literal + "}",
                headers={"Content-Type": "application/json"},
            )
            assert response.status_code == 422
        assert _worker(client, "W")["completedJobs"] == 0

    def test_double_complete_does_not_double_credit(self, client):
        _worker(client, "W")
        job = _create(client, amount="₹800")
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W"})
        assert client.post(f"/api/jobs/{job['id']}/complete", json={"workerId": "W"}).status_code == 200
        assert client.post(f"/api/jobs/{job['id']}/complete", json={"workerId": "W"}).status_code == 409

        worker = _worker(client, "W")
        assert worker["completedJobs"] == 1
        assert worker["totalEarnings"] == 800


class TestGenericUpdate:
    def test_dispatches_named_transitions(self, client):
        _worker(client, "W")
        job = _create(client, amount="₹700")
        url = f"/api/jobs/{job['id']}"

        assert client.put(url, json={"status": "accepted", "workerId": "W"}).json()["data"]["status"] == "accepted"
        assert client.put(url, json={"status": "available"}).json()["data"]["assignedWorkerId"] is None
        client.put(url, json={"status": "accepted", "workerId": "W"})
        done = client.put(url, json={"status": "completed", "workerId": "W"}).json()
        assert done["data"]["status"] == "completed"
        assert done["earnings"] == 700

    def test_arbitrary_status_rejected(self, client):
        job = _create(client)
        response = client.put(f"/api/jobs/{job['id']}", json={"status": "on_hold"})
        assert response.status_code == 400
        assert "/status" in response.json()["error"]

    def test_admin_override(self, client):
        job = _create(client)
        response = client.put(f"/api/jobs/{job['id']}/status", json={"status": "on_hold"})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "on_hold"

    def test_admin_override_keeps_assignment_rule(self, client):
        job = _create(client)
        response = client.put(f"/api/jobs/{job['id']}/status", json={"status": "completed"})
        assert response.status_code == 400


class TestDelete:
    def test_delete(self, client):
        job = _create(client)
        response = client.delete(f"/api/jobs/{job['id']}")
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(f"/api/jobs/{job['id']}").status_code == 404

    def test_delete_missing(self, client):
        response = client.delete("/api/jobs/missing")
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestScenarios:
    def test_accept_and_complete_credits_worker(self, client):
        _worker(client, "W")
        job = _create(client, amount="₹800")
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "W"})
        client.post(f"/api/jobs/{job['id']}/complete", json={"workerId": "W"})

        stored = client.get(f"/api/jobs/{job['id']}").json()["data"]
        assert stored["status"] == "completed"
        assert stored["earnings"] == 800
        worker = _worker(client, "W")
        assert worker["completedJobs"] == 1
        assert worker["totalEarnings"] == 800

    def test_competing_accept(self, client):
        job = _create(client)
        client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "X"})
        response = client.post(f"/api/jobs/{job['id']}/accept", json={"workerId": "Y"})
        assert response.status_code == 409
        assert client.get(f"/api/jobs/{job['id']}").json()["data"]["assignedWorkerId"] == "X"
