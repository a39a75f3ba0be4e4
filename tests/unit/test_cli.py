"""
CLI Tests
Tests for rowproof_cli: build, verify, check and config commands.
"""
import json

import pytest

from orchestrator.artifacts.io import bundle_path, load_bundle
from rowproof_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)

from fixtures.common import make_anchor_record


@pytest.fixture(autouse=True)
def _no_user_config(tmp_path, monkeypatch):
    """Run every CLI test from an empty directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


class TestParser:
    """Tests for argument parsing."""

    def test_build_args(self):
        args = create_parser().parse_args(
            ["build", "--csv", "d.csv", "--batch-size", "4", "--drop-column", "A", "--drop-column", "B"]
        )
        assert args.csv == "d.csv"
        assert args.batch_size == 4
        assert args.drop_columns == ["A", "B"]

    def test_verify_requires_batch_and_row(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["verify", "--batch", "0"])

    def test_no_command(self):
        assert main([]) == EXIT_RUNTIME_ERROR


class TestBuildCommand:
    """Tests for `rowproof build`."""

    def test_build_json(self, tmp_path, sample_csv, capsys):
        out = tmp_path / "artifacts"
        code = main(["build", "--csv", str(sample_csv), "--batch-size", "4", "--out", str(out), "--json"])

        assert code == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["batchCount"] == 2
        assert summary["rowCount"] == 7
        assert bundle_path(out, 1).exists()

    def test_build_human(self, tmp_path, sample_csv, capsys):
        code = main(["build", "--csv", str(sample_csv), "--out", str(tmp_path / "a")])
        assert code == EXIT_SUCCESS
        assert "batches: 1" in capsys.readouterr().out

    def test_build_missing_csv(self, tmp_path, capsys):
        code = main(["build", "--csv", str(tmp_path / "missing.csv"), "--out", str(tmp_path / "a")])
        assert code == EXIT_RUNTIME_ERROR
        assert "ARTIFACT_NOT_FOUND" in capsys.readouterr().err

    def test_build_bad_batch_size(self, sample_csv, tmp_path, capsys):
        code = main(["build", "--csv", str(sample_csv), "--batch-size", "0", "--out", str(tmp_path / "a")])
        assert code == EXIT_RUNTIME_ERROR
        assert "INVALID_BATCH_SIZE" in capsys.readouterr().err


class TestVerifyCommand:
    """Tests for `rowproof verify`."""

    def test_verify_ok(self, built_artifacts, capsys):
        code = main(["verify", "--batch", "1", "--row", "2", "--out", str(built_artifacts), "--json"])

        assert code == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is True
        assert report["rootSource"] == "bundle"

    def test_verify_with_anchors(self, built_artifacts, tmp_path, capsys):
        bundle = load_bundle(bundle_path(built_artifacts, 0))
        anchors = tmp_path / "anchors.json"
        anchors.write_text(json.dumps([make_anchor_record(bundle).model_dump(by_alias=True)]))

        code = main([
            "verify", "--batch", "0", "--row", "0",
            "--out", str(built_artifacts), "--anchors", str(anchors), "--json",
        ])

        assert code == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["rootSource"] == "anchor"

    def test_verify_anchor_mismatch(self, built_artifacts, tmp_path):
        bundle = load_bundle(bundle_path(built_artifacts, 0))
        anchors = tmp_path / "anchors.json"
        anchors.write_text(json.dumps([
            make_anchor_record(bundle, merkle_root="0x" + "00" * 32).model_dump(by_alias=True)
        ]))

        code = main(["verify", "--batch", "0", "--row", "0", "--out", str(built_artifacts), "--anchors", str(anchors)])
        assert code == EXIT_VERIFICATION_FAILED

    def test_verify_corrupt_anchors(self, built_artifacts, tmp_path, capsys):
        anchors = tmp_path / "anchors.json"
        anchors.write_text("{not json")

        code = main(["verify", "--batch", "0", "--row", "0", "--out", str(built_artifacts), "--anchors", str(anchors)])

        assert code == EXIT_RUNTIME_ERROR
        assert "Error [SCHEMA_VALIDATION_ERROR]" in capsys.readouterr().err

    def test_verify_missing_row(self, built_artifacts, capsys):
        code = main(["verify", "--batch", "1", "--row", "3", "--out", str(built_artifacts)])
        assert code == EXIT_RUNTIME_ERROR
        assert "PROOF_ENTRY_NOT_FOUND" in capsys.readouterr().err

    def test_verify_missing_batch(self, built_artifacts):
        assert main(["verify", "--batch", "7", "--row", "0", "--out", str(built_artifacts)]) == EXIT_RUNTIME_ERROR


class TestCheckCommand:
    """Tests for `rowproof check`."""

    def test_check_ok(self, built_artifacts, capsys):
        code = main(["check", "--batch", "0", "--out", str(built_artifacts), "--json", "--debug"])

        assert code == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["ok"] is True
        assert len(summary["checks"]) == 4

    def test_check_tampered(self, built_artifacts, capsys):
        path = bundle_path(built_artifacts, 0)
        data = json.loads(path.read_text())
        data["leaves"][0] = data["leaves"][1]
        path.write_text(json.dumps(data))

        code = main(["check", "--batch", "0", "--out", str(built_artifacts)])

        assert code == EXIT_VERIFICATION_FAILED
        assert "ok: false" in capsys.readouterr().out


class TestConfigCommand:
    """Tests for `rowproof config`."""

    def test_init_then_show(self, tmp_path, capsys):
        path = tmp_path / "rowproof.json"
        assert main(["config", "--init", "--path", str(path)]) == EXIT_SUCCESS
        assert path.exists()
        capsys.readouterr()

        assert main(["config", "--show", "--path", str(path)]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["batch_size"] == 1024

    def test_init_refuses_overwrite(self, tmp_path):
        path = tmp_path / "rowproof.json"
        path.write_text("{}")
        assert main(["config", "--init", "--path", str(path)]) == EXIT_RUNTIME_ERROR

    def test_config_file_used_by_build(self, tmp_path, sample_csv, capsys):
        config = tmp_path / "custom.json"
        config.write_text(json.dumps({"batch_size": 2, "csv_path": str(sample_csv)}))

        code = main(["--config", str(config), "build", "--out", str(tmp_path / "a"), "--json"])

        assert code == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["batchCount"] == 4
