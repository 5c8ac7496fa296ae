from pathlib import Path

import pytest

from baselinekit.model.baseline import (
    ErrorKind,
    ProbeResult,
    SyncFailure,
    SyncOptions,
    SyncSuccess,
)


def _success(**kwargs):
    return SyncSuccess(
        ref="main",
        ref_source="defaulted",
        baseline_url="https://example.org/docs.git",
        baseline_source="default",
        root=Path("/cache/docs/main"),
        **kwargs,
    )


@pytest.mark.short
def test_probe_result_ok_flag():
    assert ProbeResult(changed=False, current_sha="a" * 40).ok
    assert not ProbeResult(changed=True, error="x").ok


@pytest.mark.short
def test_probe_result_rejects_false_confidence():
    with pytest.raises(ValueError):
        ProbeResult(changed=False, current_sha=None, error="timeout")


@pytest.mark.short
def test_sync_options_defaults():
    options = SyncOptions()
    assert not options.check_only
    assert not options.skip_fetch_if_unchanged
    assert options.track_moving_head


@pytest.mark.short
def test_success_variant():
    result = _success(commit_sha="a" * 40, changed=False, skipped_fetch=True)
    assert result.ok
    assert result.error is None
    data = result.to_dict()
    assert data["root"] == "/cache/docs/main"
    assert data["skippedFetch"] is True
    assert data["baselineSource"] == "default"


@pytest.mark.short
def test_failure_variant_has_no_root():
    result = SyncFailure(
        ref="main",
        ref_source="defaulted",
        baseline_url="nonsense",
        baseline_source="explicit-override",
        kind=ErrorKind.invalid_location,
        error="Invalid baseline: nonsense",
    )
    assert not result.ok
    assert result.root is None
    assert result.commit_sha is None
    assert result.to_dict()["errorKind"] == "invalid-location"


@pytest.mark.short
def test_results_are_frozen():
    result = _success()
    with pytest.raises(AttributeError):
        result.root = None
