"""Tests for studio session state transitions."""

from photolab.models import ANGLES, GenerationState, ProductImage
from photolab.session import StudioSession


def _result(index: int = 0) -> ProductImage:
    return ProductImage.from_angle(ANGLES[index], "data:image/png;base64,AAAA")


def test_new_session_is_idle():
    session = StudioSession()

    assert session.status is GenerationState.IDLE
    assert session.source_image is None
    assert not session.can_generate


def test_reset_clears_everything(source_uri):
    """Test that reset returns to IDLE with no image, results, prompt, error or cooldown."""
    session = StudioSession()
    session.set_source_image(source_uri, token="abc")
    session.style_prompt = "soft sun"
    session.results.append(_result())
    session.next_angle_index = 1
    session.pause_for_rate_limit(cooldown_until=2000.0, message="Rate limit reached.")

    session.reset()

    assert session.source_image is None
    assert session.results == []
    assert session.style_prompt == ""
    assert session.error is None
    assert session.rate_limited is False
    assert session.cooldown_until is None
    assert session.next_angle_index == 0
    assert session.upload_token is None
    assert session.status is GenerationState.IDLE


def test_new_source_image_discards_previous_results(session, source_uri):
    session.results.append(_result())
    session.fail("boom")

    session.set_source_image(source_uri + "AA", token="upload-2")

    assert session.results == []
    assert session.error is None
    assert session.status is GenerationState.IDLE
    assert session.upload_token == "upload-2"


def test_rejected_upload_keeps_current_source(session):
    current = session.source_image

    session.reject_upload("Image exceeds 15MB limit.", token="too-big")

    assert session.source_image == current
    assert session.error == "Image exceeds 15MB limit."


def test_run_disabled_while_loading(session):
    assert session.can_generate

    session.begin()

    assert session.is_loading
    assert session.progress == 5
    assert not session.can_generate


def test_resume_begin_keeps_results(session):
    session.results.append(_result())
    session.next_angle_index = 1
    session.progress = 40
    session.pause_for_rate_limit(cooldown_until=10.0, message="Rate limit reached.")

    session.begin(keep_results=True)

    assert len(session.results) == 1
    assert session.next_angle_index == 1
    assert session.progress == 40
    assert session.rate_limited is False


def test_cooldown_remaining_counts_down(session):
    session.pause_for_rate_limit(cooldown_until=160.0, message="Rate limit reached.")

    assert session.cooldown_remaining(100.0) == 60.0
    assert not session.can_resume(100.0)
    assert session.cooldown_remaining(200.0) == 0.0
    assert session.can_resume(200.0)


def test_failure_is_not_resumable(session):
    session.fail("Network unreachable")

    assert session.status is GenerationState.ERROR
    assert not session.can_resume(0.0)
    assert session.can_generate
