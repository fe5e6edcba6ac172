"""Tests for the authentication workflow."""
import pytest

from faceauth.core.exceptions import InvalidDescriptorError, InvalidTransitionError
from faceauth.domain.entities.identity import Identity
from faceauth.domain.value_objects.matching import AuthenticationStatus
from faceauth.services.authentication import AuthenticationWorkflow
from helpers import FakeDetector, descriptor_at


def test_no_face_is_distinct_from_rejection(authentication):
    result = authentication.authenticate(None)

    assert result.status is AuthenticationStatus.NO_FACE_DETECTED
    assert result.outcome is None
    assert result.accepted is False


def test_empty_repository_rejects(authentication):
    result = authentication.authenticate(descriptor_at(0.0))

    assert result.status is AuthenticationStatus.REJECTED
    assert result.outcome is not None
    assert result.outcome.name is None


def test_accepts_enrolled_identity(authentication, repository):
    repository.add(Identity(name="Alice", descriptor=descriptor_at(0.0)))

    result = authentication.authenticate(descriptor_at(0.2))

    assert result.status is AuthenticationStatus.ACCEPTED
    assert result.accepted
    assert result.name == "Alice"
    assert result.outcome.distance == pytest.approx(0.2)


def test_sees_identities_enrolled_after_construction(authentication, repository):
    assert authentication.authenticate(descriptor_at(0.1)).status is AuthenticationStatus.REJECTED

    repository.add(Identity(name="Alice", descriptor=descriptor_at(0.0)))

    assert authentication.authenticate(descriptor_at(0.1)).name == "Alice"


def test_malformed_descriptor_raises(authentication, repository):
    repository.add(Identity(name="Alice", descriptor=descriptor_at(0.0)))

    with pytest.raises(InvalidDescriptorError):
        authentication.authenticate([0.1, 0.2])


class TestImageCapture:
    """Authentication driven by a face detector."""

    def test_detected_face_is_matched(self, repository, matcher):
        repository.add(Identity(name="Alice", descriptor=descriptor_at(0.0)))
        detector = FakeDetector({b"capture.jpg": descriptor_at(0.1)})
        workflow = AuthenticationWorkflow(repository, matcher, detector=detector)

        assert workflow.authenticate_image(b"capture.jpg").name == "Alice"

    @pytest.mark.parametrize("raise_on_missing", [False, True])
    def test_missing_face(self, repository, matcher, raise_on_missing):
        detector = FakeDetector(raise_on_missing=raise_on_missing)
        workflow = AuthenticationWorkflow(repository, matcher, detector=detector)

        result = workflow.authenticate_image(b"wall.jpg")

        assert result.status is AuthenticationStatus.NO_FACE_DETECTED

    def test_requires_detector(self, authentication):
        with pytest.raises(InvalidTransitionError):
            authentication.authenticate_image(b"capture.jpg")
