"""RPC Transport — HTTP tests for queries, mutations and batches.

Tests cover:
    - GET with ?input= runs queries; POST with JSON body runs mutations
    - Envelope status codes follow the error code
    - Undecodable input is BAD_INPUT, not a crash
    - Session cookie reaches protected procedures
    - ?batch=1 returns one envelope per path
"""

import json

SIGNED_IN = {"Cookie": "session-token=valid-token"}


def _input(value) -> dict:
    return {"input": json.dumps(value)}


async def test_hello_query(client):
    response = await client.get("/api/trpc/example.hello", params=_input({"text": "world"}))
    assert response.status_code == 200
    assert response.json() == {"result": {"data": {"greeting": "Hello world"}}}


async def test_hello_query_with_empty_text(client):
    response = await client.get("/api/trpc/example.hello", params=_input({"text": ""}))
    assert response.json() == {"result": {"data": {"greeting": "Hello "}}}


async def test_missing_input_is_bad_input(client):
    response = await client.get("/api/trpc/example.hello")
    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "BAD_INPUT"
    assert body["error"]["data"]["zodError"]["formErrors"]


async def test_wrong_type_reports_field(client):
    response = await client.get("/api/trpc/example.hello", params=_input({"text": 1}))
    assert response.status_code == 400
    assert "text" in response.json()["error"]["data"]["zodError"]["fieldErrors"]


async def test_malformed_json_is_bad_input(client):
    response = await client.get("/api/trpc/example.hello", params={"input": "{not json"})
    assert response.status_code == 400
    assert response.json() == {
        "error": {
            "code": "BAD_INPUT",
            "message": "Input is not valid JSON",
            "data": {"zodError": {
                "formErrors": ["Input is not valid JSON"], "fieldErrors": {},
            }},
        },
    }


async def test_unknown_procedure_is_not_found(client):
    response = await client.get("/api/trpc/example.nope")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_protected_query_without_cookie(client):
    response = await client.get("/api/trpc/example.get_secret_message")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


async def test_protected_query_with_cookie(client):
    response = await client.get("/api/trpc/example.get_secret_message", headers=SIGNED_IN)
    assert response.status_code == 200
    assert response.json() == {"result": {"data": "you can now see this secret message!"}}


async def test_whoami_with_cookie(client):
    response = await client.get("/api/trpc/example.whoami", headers=SIGNED_IN)
    assert response.json()["result"]["data"]["email"] == "ada@example.com"


async def test_mutation_over_post(client):
    response = await client.post("/api/trpc/notes.save_note", json={"body": "remember"})
    assert response.status_code == 200
    assert response.json() == {"result": {"data": {"saved": "remember"}}}


async def test_mutation_over_get_not_supported(client):
    response = await client.get("/api/trpc/notes.save_note", params=_input({"body": "x"}))
    assert response.status_code == 405
    assert response.json()["error"]["code"] == "METHOD_NOT_SUPPORTED"


async def test_query_over_post_not_supported(client):
    response = await client.post("/api/trpc/example.hello", json={"text": "x"})
    assert response.status_code == 405


async def test_malformed_post_body_is_bad_input(client):
    response = await client.post(
        "/api/trpc/notes.save_note", content=b"{oops",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_INPUT"


async def test_batch_query_mixed_statuses(client):
    response = await client.get(
        "/api/trpc/example.hello,example.get_secret_message,example.hello",
        params={"batch": "1", "input": json.dumps({"0": {"text": "a"}, "2": {"text": "c"}})},
    )
    assert response.status_code == 207
    body = response.json()
    assert body[0] == {"result": {"data": {"greeting": "Hello a"}}}
    assert body[1]["error"]["code"] == "UNAUTHORIZED"
    assert body[2] == {"result": {"data": {"greeting": "Hello c"}}}


async def test_batch_query_same_status(client):
    response = await client.get(
        "/api/trpc/example.hello,example.hello",
        params={"batch": "1", "input": json.dumps({"0": {"text": "a"}, "1": {"text": "b"}})},
    )
    assert response.status_code == 200
    assert [item["result"]["data"]["greeting"] for item in response.json()] == [
        "Hello a", "Hello b",
    ]


async def test_batch_input_must_be_object(client):
    response = await client.get(
        "/api/trpc/example.hello", params={"batch": "1", "input": json.dumps([1])},
    )
    assert response.status_code == 400


async def test_unknown_input_keys_are_dropped(client):
    response = await client.get(
        "/api/trpc/example.hello", params=_input({"text": "a", "extra": 1}),
    )
    assert response.status_code == 200
    assert response.json() == {"result": {"data": {"greeting": "Hello a"}}}


async def test_invalid_query_parameter_is_bad_input(client):
    response = await client.get("/api/trpc/example.hello", params={"batch": "maybe"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "BAD_INPUT"
    assert error["data"]["zodError"]["formErrors"] == []
    assert list(error["data"]["zodError"]["fieldErrors"]) == ["query.batch"]
