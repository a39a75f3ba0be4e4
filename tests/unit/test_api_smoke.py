"""
API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /verify recomputes the root and reports ok / mismatch
3. POST /verify rejects malformed digests with 400 INVALID_DIGEST
4. GET /batches and GET /batches/{id}/proofs/{row} read committed artifacts
5. Anchored roots are used when configured
"""
import json

import pytest
from fastapi.testclient import TestClient

from core.crypto.hashing import to_hex
from core.merkle.merkle_tree import MerkleTree
from orchestrator.artifacts.io import bundle_path, load_bundle

from api.app import app

from fixtures.common import make_anchor_record, make_leaves


# Create test client
client = TestClient(app)

FIVE_LEAF_ROOT = "0xac099a1ac20c81168ed2e93ca53f8c5e951f9f35741067df028577319aa0dea0"


@pytest.fixture
def artifacts_env(built_artifacts, tmp_path, monkeypatch):
    """Point the API at a freshly built artifacts root."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ROWPROOF_ARTIFACTS_DIR", str(built_artifacts))
    return built_artifacts


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_ok(self):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "rowproof-api"

    def test_root_is_health(self):
        assert client.get("/").json()["ok"] is True


class TestVerifyEndpoint:
    """Tests for POST /verify."""

    def _body(self, index: int = 3) -> dict:
        leaves = make_leaves(5)
        tree = MerkleTree(leaves)
        return {
            "leaf": to_hex(leaves[index]),
            "proof": tree.proof_dicts(index),
            "root": tree.root_hex(),
        }

    def test_valid_proof(self):
        response = client.post("/verify", json=self._body())

        assert response.status_code == 200
        assert response.json() == {"ok": True, "computedRoot": FIVE_LEAF_ROOT}

    def test_uppercase_root_accepted(self):
        body = self._body()
        body["root"] = "0x" + body["root"][2:].upper()
        assert client.post("/verify", json=body).json()["ok"] is True

    def test_mismatch_is_not_an_error(self):
        body = self._body()
        body["root"] = "0x" + "00" * 32

        response = client.post("/verify", json=body)

        assert response.status_code == 200
        assert response.json()["ok"] is False
        assert response.json()["computedRoot"] == FIVE_LEAF_ROOT

    def test_flipped_side(self):
        body = self._body()
        body["proof"][0]["isLeftSibling"] = not body["proof"][0]["isLeftSibling"]
        assert client.post("/verify", json=body).json()["ok"] is False

    def test_single_leaf_empty_proof(self):
        leaf = to_hex(make_leaves(1)[0])
        response = client.post("/verify", json={"leaf": leaf, "proof": [], "root": leaf})
        assert response.json()["ok"] is True

    @pytest.mark.parametrize("field,value", [
        ("leaf", "0x1234"),
        ("root", "not-hex"),
        ("leaf", "0x" + "zz" * 32),
    ])
    def test_malformed_digest(self, field, value):
        body = self._body()
        body[field] = value

        response = client.post("/verify", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["ok"] is False
        assert data["error"]["code"] == "INVALID_DIGEST"

    def test_malformed_sibling(self):
        body = self._body()
        body["proof"][1]["sibling"] = "0xabc"
        response = client.post("/verify", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DIGEST"

    def test_missing_field_rejected(self):
        body = self._body()
        del body["proof"][0]["isLeftSibling"]
        assert client.post("/verify", json=body).status_code == 422

    def test_non_boolean_side_rejected(self):
        body = self._body()
        body["proof"][0]["isLeftSibling"] = "false"
        assert client.post("/verify", json=body).status_code == 422


class TestBatchesEndpoint:
    """Tests for GET /batches and stored proofs."""

    def test_index(self, artifacts_env):
        response = client.get("/batches")

        assert response.status_code == 200
        data = response.json()
        assert data["batchSize"] == 4
        assert [b["batchId"] for b in data["batches"]] == [0, 1]

    def test_stored_proof(self, artifacts_env):
        response = client.get("/batches/1/proofs/2")

        assert response.status_code == 200
        data = response.json()
        bundle = load_bundle(bundle_path(artifacts_env, 1))
        assert data["ok"] is True
        assert data["batchId"] == 1
        assert data["rowOffset"] == 2
        assert data["leaf"] == bundle.leaves[2]
        assert data["root"] == bundle.batch.root
        assert data["rootSource"] == "bundle"
        assert data["proof"] == bundle.proofs[2].proof_dicts()

    def test_missing_row(self, artifacts_env):
        response = client.get("/batches/1/proofs/3")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PROOF_ENTRY_NOT_FOUND"

    def test_missing_batch(self, artifacts_env):
        response = client.get("/batches/9/proofs/0")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ARTIFACT_NOT_FOUND"

    def test_missing_index(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ROWPROOF_ARTIFACTS_DIR", str(tmp_path / "empty"))
        assert client.get("/batches").status_code == 404

    def test_anchored_root(self, artifacts_env, tmp_path, monkeypatch):
        bundle = load_bundle(bundle_path(artifacts_env, 0))
        anchors = tmp_path / "anchors.json"
        anchors.write_text(json.dumps([make_anchor_record(bundle).model_dump(by_alias=True)]))
        monkeypatch.setenv("ROWPROOF_ANCHORS_PATH", str(anchors))

        data = client.get("/batches/0/proofs/1").json()

        assert data["ok"] is True
        assert data["rootSource"] == "anchor"

    def test_anchored_root_mismatch(self, artifacts_env, tmp_path, monkeypatch):
        bundle = load_bundle(bundle_path(artifacts_env, 0))
        anchors = tmp_path / "anchors.json"
        anchors.write_text(json.dumps([
            make_anchor_record(bundle, merkle_root="0x" + "11" * 32).model_dump(by_alias=True)
        ]))
        monkeypatch.setenv("ROWPROOF_ANCHORS_PATH", str(anchors))

        response = client.get("/batches/0/proofs/1")

        assert response.status_code == 200
        assert response.json()["ok"] is False

    def test_unanchored_batch(self, artifacts_env, tmp_path, monkeypatch):
        anchors = tmp_path / "anchors.json"
        anchors.write_text("[]")
        monkeypatch.setenv("ROWPROOF_ANCHORS_PATH", str(anchors))

        response = client.get("/batches/1/proofs/0")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "BATCH_NOT_ANCHORED"


    def test_corrupt_anchor_file(self, artifacts_env, tmp_path, monkeypatch):
        anchors = tmp_path / "anchors.json"
        anchors.write_text("{not json")
        monkeypatch.setenv("ROWPROOF_ANCHORS_PATH", str(anchors))

        response = client.get("/batches/0/proofs/0")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "SCHEMA_VALIDATION_ERROR"

class TestErrorHandling:
    """Tests for the catch-all error handler."""

    def test_unexpected_error_is_internal_error(self, artifacts_env, monkeypatch):
        def _boom(path):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr("api.routes.batches.load_index", _boom)
        safe_client = TestClient(app, raise_server_exceptions=False)

        response = safe_client.get("/batches")

        assert response.status_code == 500
        data = response.json()
        assert data["ok"] is False
        assert data["error"]["code"] == "INTERNAL_ERROR"
        assert data["error"]["details"] == {"type": "RuntimeError"}
