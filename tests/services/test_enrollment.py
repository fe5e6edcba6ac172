"""Tests for the enrollment workflow state machine."""
import pytest

from faceauth.core.exceptions import InvalidTransitionError, StorageIOError
from faceauth.domain.entities.identity import Identity
from faceauth.domain.value_objects.enrollment import (
    Committed,
    CollectingFace,
    CollectingName,
    EnrollmentIssue,
    EnrollmentStage,
)
from faceauth.infrastructure.storage import InMemoryIdentityStore
from faceauth.services.enrollment import EnrollmentWorkflow
from faceauth.services.repository import IdentityRepository
from helpers import FakeDetector, descriptor_at


@pytest.fixture
def workflow(repository):
    return EnrollmentWorkflow(repository)


def test_starts_collecting_name(workflow):
    assert isinstance(workflow.state, CollectingName)
    assert workflow.state.stage is EnrollmentStage.COLLECTING_NAME


def test_happy_path_commits_identity(workflow, repository):
    step = workflow.submit_name("Alice")
    assert step.ok
    assert isinstance(step.state, CollectingFace)
    assert step.state.name == "Alice"

    step = workflow.submit_face(descriptor_at(0.3))

    assert step.ok
    assert isinstance(step.state, Committed)
    assert step.state.identity.name == "Alice"
    assert repository.names() == ["Alice"]


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_name_stays_collecting_name(workflow, name):
    step = workflow.submit_name(name)

    assert step.issue is EnrollmentIssue.EMPTY_NAME
    assert isinstance(workflow.state, CollectingName)


def test_taken_name_stays_collecting_name(workflow, repository):
    repository.add(Identity(name="Alice", descriptor=descriptor_at(0.1)))

    step = workflow.submit_name("Alice")

    assert step.issue is EnrollmentIssue.NAME_EXISTS
    assert isinstance(workflow.state, CollectingName)

    step = workflow.submit_name("Alice B.")
    assert step.ok


def test_name_check_is_live(workflow, repository):
    repository.add(Identity(name="Alice", descriptor=descriptor_at(0.1)))
    assert workflow.submit_name("Alice").issue is EnrollmentIssue.NAME_EXISTS

    repository.remove("Alice")

    assert workflow.submit_name("Alice").ok


def test_no_face_detected_allows_retry(workflow, repository):
    workflow.submit_name("Alice")

    step = workflow.submit_face(None)

    assert step.issue is EnrollmentIssue.NO_FACE_DETECTED
    assert isinstance(workflow.state, CollectingFace)
    assert len(repository) == 0

    assert workflow.submit_face(descriptor_at(0.2)).ok
    assert repository.names() == ["Alice"]


def test_commit_race_reports_conflict_without_overwriting(repository):
    first = EnrollmentWorkflow(repository)
    second = EnrollmentWorkflow(repository)
    first.submit_name("Alice")
    second.submit_name("Alice")

    assert first.submit_face(descriptor_at(0.1)).ok
    step = second.submit_face(descriptor_at(0.9, axis=2))

    assert step.issue is EnrollmentIssue.NAME_CONFLICT
    assert isinstance(second.state, CollectingName)
    assert repository.get("Alice").descriptor[0] == 0.1


def test_storage_failure_keeps_collecting_face(codec):
    class FailingStore(InMemoryIdentityStore):
        def write(self, document):
            raise StorageIOError("quota exceeded")

    repository = IdentityRepository(store=FailingStore(), codec=codec)
    workflow = EnrollmentWorkflow(repository)
    workflow.submit_name("Alice")

    with pytest.raises(StorageIOError):
        workflow.submit_face(descriptor_at(0.1))

    assert isinstance(workflow.state, CollectingFace)
    assert len(repository) == 0


def test_out_of_order_operations_raise(workflow):
    with pytest.raises(InvalidTransitionError):
        workflow.submit_face(descriptor_at(0.1))

    workflow.submit_name("Alice")
    with pytest.raises(InvalidTransitionError):
        workflow.submit_name("Bob")

    workflow.submit_face(descriptor_at(0.1))
    with pytest.raises(InvalidTransitionError):
        workflow.submit_face(descriptor_at(0.2))


def test_restart_after_commit(workflow, repository):
    workflow.submit_name("Alice")
    workflow.submit_face(descriptor_at(0.1))

    step = workflow.restart()

    assert isinstance(step.state, CollectingName)
    assert workflow.submit_name("Bob").ok
    assert workflow.submit_face(descriptor_at(0.2, axis=1)).ok
    assert repository.names() == ["Alice", "Bob"]


class TestImageCapture:
    """Enrollment driven by a face detector."""

    def test_detected_face_is_committed(self, repository):
        detector = FakeDetector({b"alice.jpg": descriptor_at(0.1)})
        workflow = EnrollmentWorkflow(repository, detector=detector)
        workflow.submit_name("Alice")

        step = workflow.submit_image(b"alice.jpg")

        assert step.ok
        assert detector.calls == [b"alice.jpg"]
        assert repository.names() == ["Alice"]

    @pytest.mark.parametrize("raise_on_missing", [False, True])
    def test_missing_face_is_reported(self, repository, raise_on_missing):
        detector = FakeDetector(raise_on_missing=raise_on_missing)
        workflow = EnrollmentWorkflow(repository, detector=detector)
        workflow.submit_name("Alice")

        step = workflow.submit_image(b"wall.jpg")

        assert step.issue is EnrollmentIssue.NO_FACE_DETECTED
        assert isinstance(workflow.state, CollectingFace)

    def test_requires_detector(self, workflow):
        workflow.submit_name("Alice")

        with pytest.raises(InvalidTransitionError):
            workflow.submit_image(b"alice.jpg")
