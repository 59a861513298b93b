"""Integration tests for transaction API endpoints."""

from uuid import uuid4

from httpx import AsyncClient

from conftest import kookmin_row, kookmin_sheet, make_xlsx

STATEMENT = make_xlsx(
    kookmin_sheet(
        kookmin_row("2024.02.14 12:30:00", "스타벅스 강남점", "5,000"),
        kookmin_row("2024.02.15 08:10:00", "GS25 역삼점", "2,400", "체크"),
    )
)


async def upload(client: AsyncClient, headers: dict, content: bytes = STATEMENT, **extra):
    return await client.post(
        "/api/v1/transactions/upload",
        content=content,
        headers={**headers, "X-Filename": "statement.xlsx", **extra},
    )


class TestUpload:
    """Test the raw-body upload endpoint."""

    async def test_upload_returns_camel_case_list(self, client, auth_headers, test_user):
        response = await upload(client, auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert [t["merchant"] for t in data] == ["GS25 역삼점", "스타벅스 강남점"]
        assert data[0]["paymentMethod"] == "체크"
        assert data[0]["category"] == "Convenience"
        assert data[1]["category"] == "Date"
        assert data[1]["status"] == "completed"

    async def test_second_upload_adds_nothing(self, client, auth_headers, test_user):
        await upload(client, auth_headers)
        response = await upload(client, auth_headers)

        assert response.status_code == 201
        assert len(response.json()) == 2

    async def test_empty_body(self, client, auth_headers, test_user):
        response = await upload(client, auth_headers, content=b"")

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_002"

    async def test_unsupported_format(self, client, auth_headers, test_user):
        response = await upload(client, auth_headers, **{"X-Statement-Format": "shinhan"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_004"

    async def test_not_a_workbook(self, client, auth_headers, test_user):
        response = await client.post(
            "/api/v1/transactions/upload",
            content=b"hello",
            headers={**auth_headers, "X-Filename": "notes.txt"},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "PARSE_001"

    async def test_unknown_user(self, client):
        response = await upload(client, {"X-User-Email": "nobody@example.com"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "NF_001"

    async def test_missing_identity(self, client):
        response = await client.post("/api/v1/transactions/upload", content=STATEMENT)

        assert response.status_code == 401


class TestTransactionEndpoints:
    async def test_list(self, client, auth_headers, test_user):
        await upload(client, auth_headers)

        response = await client.get("/api/v1/transactions", headers=auth_headers)

        assert response.status_code == 200
        assert len(response.json()) == 2

    async def test_update_category(self, client, auth_headers, test_user):
        transaction_id = (await upload(client, auth_headers)).json()[0]["id"]

        response = await client.patch(
            f"/api/v1/transactions/{transaction_id}/category",
            json={"category": "Snacks"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["category"] == "Snacks"

    async def test_blank_category_is_rejected(self, client, auth_headers, test_user):
        transaction = (await upload(client, auth_headers)).json()[0]
        transaction_id = transaction["id"]

        response = await client.patch(
            f"/api/v1/transactions/{transaction_id}/category",
            json={"category": "   "},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"
        listed = (await client.get("/api/v1/transactions", headers=auth_headers)).json()
        assert listed[0]["category"] == transaction["category"]

    async def test_update_amount_rejects_negative(self, client, auth_headers, test_user):
        transaction_id = (await upload(client, auth_headers)).json()[0]["id"]

        response = await client.patch(
            f"/api/v1/transactions/{transaction_id}/amount",
            json={"amount": -1},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    async def test_update_amount(self, client, auth_headers, test_user):
        transaction_id = (await upload(client, auth_headers)).json()[0]["id"]

        response = await client.patch(
            f"/api/v1/transactions/{transaction_id}/amount",
            json={"amount": 2500},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["amount"] == 2500

    async def test_delete_then_reupload(self, client, auth_headers, test_user):
        transaction_id = (await upload(client, auth_headers)).json()[0]["id"]

        response = await client.delete(f"/api/v1/transactions/{transaction_id}", headers=auth_headers)
        assert response.status_code == 204

        listed = (await client.get("/api/v1/transactions", headers=auth_headers)).json()
        assert transaction_id not in {t["id"] for t in listed}

        reuploaded = (await upload(client, auth_headers)).json()
        assert len(reuploaded) == 1

    async def test_delete_unknown(self, client, auth_headers, test_user):
        response = await client.delete(f"/api/v1/transactions/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "NF_002"

    async def test_clear(self, client, auth_headers, test_user):
        await upload(client, auth_headers)

        response = await client.delete("/api/v1/transactions", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"deletedCount": 2}
        assert (await client.get("/api/v1/transactions", headers=auth_headers)).json() == []
