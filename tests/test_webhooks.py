"""Tests for notification ingestion: listener outcomes and the HTTP endpoint."""

import json

import pytest

from harness.api import deps
from harness.core.errors import StoreWriteError
from harness.main import app
from harness.services.events.base import EventStore
from harness.services.payments.signature import sign
from harness.services.payments.webhooks import IngestOutcome, NotificationListener

PAYLOAD = b'{"id": "evt_1", "type": "payment_approved", "data": {"id": "pay_1", "amount": 1000}}'


def _post(client, tenant: str, body: bytes, signature: str | None):
    headers = {"content-type": "application/json"}
    if signature is not None:
        headers["cko-signature"] = signature
    return client.post(f"/api/v1/event-listener/{tenant}", content=body, headers=headers)


class _FailingStore(EventStore):
    def append(self, notification):
        raise StoreWriteError("disk full")

    def list_all(self):
        return []


class TestNotificationListener:
    def test_valid_signature_is_accepted_and_stored(self, credentials, sql_store) -> None:
        listener = NotificationListener(credentials, sql_store)

        result = listener.receive(
            "abc", "/event-listener/abc", {"cko-signature": sign(b"sk_test_abc", PAYLOAD)}, PAYLOAD
        )

        assert result.outcome is IngestOutcome.ACCEPTED
        assert result.event.body["data"]["id"] == "pay_1"
        assert len(sql_store.list_all()) == 1

    def test_signature_header_lookup_is_case_insensitive(self, credentials, sql_store) -> None:
        listener = NotificationListener(credentials, sql_store)

        result = listener.receive(
            "abc", "/event-listener/abc", {"CKO-Signature": sign(b"sk_test_abc", PAYLOAD)}, PAYLOAD
        )

        assert result.accepted

    @pytest.mark.parametrize("headers", [{}, {"cko-signature": ""}, {"cko-signature": "0" * 64}])
    def test_bad_signature_is_rejected_without_write(self, credentials, sql_store, headers) -> None:
        listener = NotificationListener(credentials, sql_store)

        result = listener.receive("abc", "/event-listener/abc", headers, PAYLOAD)

        assert result.outcome is IngestOutcome.REJECTED
        assert result.reason == "signature_mismatch"
        assert sql_store.list_all() == []

    def test_unknown_tenant_is_rejected(self, credentials, sql_store) -> None:
        listener = NotificationListener(credentials, sql_store)

        result = listener.receive("xyz", "/event-listener/xyz", {"cko-signature": sign(b"sk_test_abc", PAYLOAD)}, PAYLOAD)

        assert result.outcome is IngestOutcome.REJECTED
        assert result.reason == "unknown_tenant"
        assert sql_store.list_all() == []

    def test_store_failure_propagates(self, credentials) -> None:
        listener = NotificationListener(credentials, _FailingStore())

        with pytest.raises(StoreWriteError):
            listener.receive("abc", "/p", {"cko-signature": sign(b"sk_test_abc", PAYLOAD)}, PAYLOAD)

    def test_non_json_body_is_kept_as_text(self, credentials, file_store) -> None:
        listener = NotificationListener(credentials, file_store)
        body = b"not json at all"

        result = listener.receive("nas", "/p", {"cko-signature": sign(b"sk_test_nas", body)}, body)

        assert result.accepted
        assert file_store.list_all()[0].body == "not json at all"


class TestEventListenerEndpoint:
    def test_accepted_notification_returns_200_and_is_listed(self, client, sql_store) -> None:
        resp = _post(client, "abc", PAYLOAD, sign(b"sk_test_abc", PAYLOAD))

        assert resp.status_code == 200
        events = client.post("/api/v1/fetch-events").json()
        assert len(events) == 1
        assert events[0]["path"] == "/api/v1/event-listener/abc"
        assert events[0]["body"] == json.loads(PAYLOAD)
        assert events[0]["headers"]["cko-signature"] == sign(b"sk_test_abc", PAYLOAD)

    def test_wrong_signature_returns_401_and_writes_nothing(self, client, sql_store) -> None:
        before = len(sql_store.list_all())

        resp = _post(client, "abc", PAYLOAD, sign(b"not-the-secret", PAYLOAD))

        assert resp.status_code == 401
        assert resp.json() == {"detail": "Rejected"}
        assert len(sql_store.list_all()) == before

    def test_missing_signature_is_rejected(self, client, sql_store) -> None:
        assert _post(client, "abc", PAYLOAD, None).status_code == 401
        assert sql_store.list_all() == []

    def test_other_tenants_secret_does_not_verify(self, client, sql_store) -> None:
        resp = _post(client, "abc", PAYLOAD, sign(b"sk_test_nas", PAYLOAD))

        assert resp.status_code == 401
        assert sql_store.list_all() == []

    def test_unknown_tenant_gets_same_flat_rejection(self, client, sql_store) -> None:
        resp = _post(client, "xyz", PAYLOAD, sign(b"sk_test_abc", PAYLOAD))

        assert resp.status_code == 401
        assert resp.json() == {"detail": "Rejected"}

    def test_signature_over_reserialised_body_is_rejected(self, client, sql_store) -> None:
        # provider signed the compact form, the wire carries a pretty-printed one
        compact = json.dumps(json.loads(PAYLOAD), separators=(",", ":")).encode()
        resp = _post(client, "abc", PAYLOAD, sign(b"sk_test_abc", compact))

        assert resp.status_code == 401
        assert sql_store.list_all() == []

    def test_replayed_notification_is_stored_again(self, client, sql_store) -> None:
        signature = sign(b"sk_test_nas", PAYLOAD)
        assert _post(client, "nas", PAYLOAD, signature).status_code == 200
        assert _post(client, "nas", PAYLOAD, signature).status_code == 200

        assert len(sql_store.list_all()) == 2

    def test_store_failure_returns_500(self, client) -> None:
        app.dependency_overrides[deps.get_store] = lambda: _FailingStore()

        resp = _post(client, "abc", PAYLOAD, sign(b"sk_test_abc", PAYLOAD))

        assert resp.status_code == 500

    def test_notifications_listed_newest_first(self, client) -> None:
        for n in range(3):
            body = json.dumps({"id": f"evt_{n}"}).encode()
            _post(client, "abc", body, sign(b"sk_test_abc", body))

        listed = client.get("/api/v1/webhook-notifications").json()
        fetched = client.post("/api/v1/fetch-events").json()

        assert [e["body"]["id"] for e in listed] == ["evt_2", "evt_1", "evt_0"]
        assert fetched == listed
