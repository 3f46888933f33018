"""Tests for the override policy, ownership headers and the manifest."""

import json
from pathlib import Path

import pytest

from springgen.artifacts import ArtifactKind, WriteAction, sha256_text
from springgen.errors import GenerationError
from springgen.policy import (
    GENERATED_HEADER,
    OWNED_HEADER,
    Manifest,
    OverridePolicy,
    header_for,
    ownership_of,
)

EXISTING = Path("Existing.java")


@pytest.mark.parametrize(
    "kind, existing, skip_if_exists, force, expected",
    [
        (ArtifactKind.BASE, None, True, False, WriteAction.CREATED),
        (ArtifactKind.EXTENSIBLE, None, True, False, WriteAction.CREATED),
        (ArtifactKind.MIGRATION, None, True, True, WriteAction.CREATED),
        (ArtifactKind.BASE, EXISTING, True, False, WriteAction.OVERWRITTEN),
        (ArtifactKind.BASE, EXISTING, False, True, WriteAction.OVERWRITTEN),
        (ArtifactKind.EXTENSIBLE, EXISTING, True, False, WriteAction.SKIPPED),
        (ArtifactKind.EXTENSIBLE, EXISTING, True, True, WriteAction.OVERWRITTEN),
        (ArtifactKind.EXTENSIBLE, EXISTING, False, True, WriteAction.OVERWRITTEN),
        (ArtifactKind.EXTENSIBLE, EXISTING, False, False, WriteAction.OVERWRITTEN),
        (ArtifactKind.MIGRATION, EXISTING, True, False, WriteAction.SKIPPED),
        (ArtifactKind.MIGRATION, EXISTING, False, True, WriteAction.SKIPPED),
    ],
)
def test_decision_table(kind, existing, skip_if_exists, force, expected):
    decision = OverridePolicy(skip_if_exists=skip_if_exists, force=force).decide(kind, existing)
    assert decision.action is expected
    assert decision.writes == (expected is not WriteAction.SKIPPED)
    assert decision.reason


def test_default_policy_skips_existing_extensible():
    assert OverridePolicy().decide(ArtifactKind.EXTENSIBLE, EXISTING).action is WriteAction.SKIPPED


def test_headers_and_ownership():
    assert header_for(ArtifactKind.BASE) == GENERATED_HEADER
    assert header_for(ArtifactKind.EXTENSIBLE) == OWNED_HEADER
    base_text = "\n".join(f"// {line}" for line in GENERATED_HEADER) + "\npackage a;\n"
    owned_text = "\n".join(f"// {line}" for line in OWNED_HEADER) + "\npackage a;\n"
    assert ownership_of(base_text) == "generator"
    assert ownership_of(owned_text) == "user"
    assert ownership_of("package a;\nclass A {}\n") is None


def test_manifest_round_trip(tmp_path):
    pth = tmp_path / ".springgen" / "manifest.json"
    m = Manifest.load(pth)
    assert m.entries == {}
    m.record("main:com/example/User.java", sha256_text("class User {}"))
    m.save()
    assert pth.exists()

    again = Manifest.load(pth)
    assert again.get("main:com/example/User.java") == sha256_text("class User {}")
    assert again.is_untouched("main:com/example/User.java", "class User {}") is True
    assert again.is_untouched("main:com/example/User.java", "class User { int x; }") is False
    assert again.is_untouched("main:com/example/Other.java", "") is None


def test_unreadable_manifest_is_ignored(tmp_path, caplog):
    pth = tmp_path / "manifest.json"
    pth.write_text("{not json", encoding="utf-8")
    with caplog.at_level("WARNING"):
        m = Manifest.load(pth)
    assert m.entries == {}
    assert "Ignoring unreadable manifest" in caplog.text


def test_manifest_save_failure_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    m = Manifest(blocker / "manifest.json", {"k": "v"})
    with pytest.raises(GenerationError):
        m.save()


def test_manifest_without_path_is_memory_only():
    m = Manifest(None)
    m.record("k", "v")
    m.save()
    assert m.get("k") == "v"


def test_manifest_save_replaces_file_atomically(tmp_path):
    pth = tmp_path / "manifest.json"
    pth.write_text('{"stale": "x"}\n', encoding="utf-8")
    Manifest(pth, {"main:A.java": "abc"}).save()
    assert json.loads(pth.read_text(encoding="utf-8")) == {"main:A.java": "abc"}
    assert [p.name for p in tmp_path.iterdir()] == ["manifest.json"]
