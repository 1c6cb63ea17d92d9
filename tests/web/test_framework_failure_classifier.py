"""Unit tests for the framework request-failure classifier."""

from __future__ import annotations

import ctypes
import logging
from typing import Annotated, Optional

import pytest

from packages.bulwark_shared.errors import (
    ErrorEntry,
    ErrorSet,
    ErrorWithContext,
    ProjectErrorRegistry,
    codes,
)
from packages.bulwark_web.failures import (
    FailureKind,
    MessageNotReadableFailure,
    MessageNotWritableFailure,
    MethodNotAllowedFailure,
    MissingHeaderFailure,
    MissingParameterFailure,
    NotAcceptableFailure,
    ParameterConversionNotSupportedFailure,
    ParameterTypeMismatchFailure,
    RequestFailure,
    TypeConversionFailure,
    UnsupportedMediaTypeFailure,
)
from packages.bulwark_web.listeners import (
    COMPLEX_TYPE_NAME,
    DEFAULT_UTILS,
    ClassificationOutcome,
    FailureListener,
    FrameworkFailureClassifier,
    resolve_safe_type_name,
)

_LOGGER_NAME = "packages.bulwark_web.listeners.framework_failures"


class _Person:
    """Internal model type whose name must never reach clients."""


class _DriftedFailure(NotAcceptableFailure, MethodNotAllowedFailure):
    """Failure that matches two rule families at once."""

    def __init__(self) -> None:
        RequestFailure.__init__(self, "drifted")


@pytest.fixture
def registry() -> ProjectErrorRegistry:
    return ProjectErrorRegistry()


@pytest.fixture
def classifier(registry: ProjectErrorRegistry) -> FrameworkFailureClassifier:
    return FrameworkFailureClassifier(registry, DEFAULT_UTILS)


def _only_entry(outcome: ClassificationOutcome) -> ErrorEntry:
    assert outcome.should_handle is True
    assert len(outcome.errors) == 1
    return next(iter(outcome.errors))


def test_constructor_rejects_missing_collaborators(registry: ProjectErrorRegistry) -> None:
    """Missing registry or utils should fail fast at construction."""
    with pytest.raises(ValueError, match="registry"):
        FrameworkFailureClassifier(None, DEFAULT_UTILS)  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="utils"):
        FrameworkFailureClassifier(registry, None)  # type: ignore[arg-type]


def test_classifier_satisfies_listener_protocol(classifier: FrameworkFailureClassifier) -> None:
    """The classifier should be usable as one stage of a listener chain."""
    assert isinstance(classifier, FailureListener)


def test_rule_order_covers_every_failure_kind(classifier: FrameworkFailureClassifier) -> None:
    """Every failure kind should have exactly one rule, in declaration order."""
    assert classifier.rule_order == tuple(FailureKind)


@pytest.mark.parametrize(
    "failure",
    [
        RuntimeError("boom"),
        ValueError("bad"),
        KeyError("missing"),
        RequestFailure("generic request failure"),
    ],
)
def test_unrecognized_failures_are_not_handled(
    classifier: FrameworkFailureClassifier, failure: BaseException
) -> None:
    """Failures outside the known families should be delegated onward."""
    outcome = classifier.classify(failure)

    assert outcome == ClassificationOutcome.not_handled()
    assert outcome.should_handle is False
    assert len(outcome.errors) == 0
    assert outcome.log_details == ()


def test_type_mismatch_example_produces_safe_metadata(
    classifier: FrameworkFailureClassifier,
) -> None:
    """A named int mismatch should expose name, value and the safe type name."""
    failure = ParameterTypeMismatchFailure("age", "twelve", ctypes.c_int32)

    outcome = classifier.classify(failure)
    entry = _only_entry(outcome)

    assert isinstance(entry, ErrorWithContext)
    assert entry.code == codes.TYPE_CONVERSION_ERROR
    assert dict(entry.metadata) == {
        "bad_property_name": "age",
        "bad_property_value": "twelve",
        "required_type": "int",
    }
    assert [key for key, _ in outcome.log_details] == [
        "exception_message",
        "bad_property_name",
        "bad_property_value",
        "required_type",
    ]
    assert outcome.log_details[0] == ("exception_message", str(failure))
    assert outcome.log_details[1] == ("bad_property_name", "age")
    assert outcome.log_details[2] == ("bad_property_value", "twelve")


def test_conversion_not_supported_carries_property_name(
    classifier: FrameworkFailureClassifier,
) -> None:
    """The conversion-not-supported variant should also expose its name."""
    failure = ParameterConversionNotSupportedFailure("when", "yesterday", _Person)

    entry = _only_entry(classifier.classify(failure))

    assert isinstance(entry, ErrorWithContext)
    assert entry.metadata["bad_property_name"] == "when"
    assert entry.metadata["required_type"] == COMPLEX_TYPE_NAME


def test_unnamed_type_conversion_omits_absent_metadata(
    classifier: FrameworkFailureClassifier,
) -> None:
    """Absent name, value and type should be dropped from metadata but logged as null."""
    failure = TypeConversionFailure(None, None)

    outcome = classifier.classify(failure)
    entry = _only_entry(outcome)

    assert isinstance(entry, ErrorWithContext)
    assert dict(entry.metadata) == {}
    assert outcome.log_details[1:] == (
        ("bad_property_name", "null"),
        ("bad_property_value", "null"),
        ("required_type", "null"),
    )


def test_internal_type_names_only_appear_in_log_details(
    classifier: FrameworkFailureClassifier,
) -> None:
    """Raw required-type reprs may be logged but never sent to clients."""
    failure = TypeConversionFailure({"id": 1}, _Person)

    outcome = classifier.classify(failure)
    entry = _only_entry(outcome)

    assert isinstance(entry, ErrorWithContext)
    assert entry.metadata["required_type"] == COMPLEX_TYPE_NAME
    assert "bad_property_name" not in entry.metadata
    assert all("_Person" not in str(value) for value in entry.metadata.values())
    assert "_Person" in dict(outcome.log_details)["required_type"]


@pytest.mark.parametrize(
    ("required_type", "expected"),
    [
        (None, None),
        (ctypes.c_byte, "byte"),
        (ctypes.c_ubyte, "byte"),
        (ctypes.c_short, "short"),
        (int, "int"),
        (ctypes.c_int32, "int"),
        (ctypes.c_int64, "long"),
        (ctypes.c_float, "float"),
        (float, "double"),
        (ctypes.c_double, "double"),
        (bool, "boolean"),
        (ctypes.c_bool, "boolean"),
        (ctypes.c_char, "char"),
        (str, "string"),
        (Optional[int], "int"),
        (int | None, "int"),
        (Annotated[str, "meta"], "string"),
        (int | str, COMPLEX_TYPE_NAME),
        (list[int], COMPLEX_TYPE_NAME),
        (dict, COMPLEX_TYPE_NAME),
        (bytes, COMPLEX_TYPE_NAME),
        (_Person, COMPLEX_TYPE_NAME),
        ("int", COMPLEX_TYPE_NAME),
    ],
)
def test_resolve_safe_type_name(required_type: object, expected: str | None) -> None:
    """Type descriptors should resolve to the closed client-safe vocabulary."""
    assert resolve_safe_type_name(required_type) == expected


def test_subclasses_resolve_to_their_primitive_family() -> None:
    """Subclasses of whitelisted types should resolve like their base type."""

    class UserId(int):
        """Integer subclass."""

    class Slug(str):
        """String subclass."""

    assert resolve_safe_type_name(UserId) == "int"
    assert resolve_safe_type_name(Slug) == "string"


@pytest.mark.parametrize(
    "failure",
    [
        MissingParameterFailure("page", "int"),
        MissingHeaderFailure("x-request-id"),
    ],
)
def test_request_binding_failures_map_to_malformed_request(
    classifier: FrameworkFailureClassifier, failure: RequestFailure
) -> None:
    """Binding failures should map to malformed request and log their message."""
    outcome = classifier.classify(failure)
    entry = _only_entry(outcome)

    assert entry.code == codes.MALFORMED_REQUEST
    assert outcome.log_details == (("exception_message", str(failure)),)


def test_required_body_missing_message_maps_to_missing_content(
    classifier: FrameworkFailureClassifier,
) -> None:
    """The body-missing marker prefix should classify as missing expected content."""
    failure = MessageNotReadableFailure("Required request body is missing: create_person")

    outcome = classifier.classify(failure)
    entry = _only_entry(outcome)

    assert entry.code == codes.MISSING_EXPECTED_CONTENT
    assert outcome.log_details == (("exception_message", str(failure)),)


def test_end_of_input_cause_maps_to_missing_content(
    classifier: FrameworkFailureClassifier,
) -> None:
    """A cause mentioning end-of-input should classify as missing expected content."""
    try:
        try:
            raise ValueError("No content to map due to end-of-input at [Source: (String)\"\"]")
        except ValueError as exc:
            raise MessageNotReadableFailure("Could not read document") from exc
    except MessageNotReadableFailure as failure:
        outcome = classifier.classify(failure)

    assert _only_entry(outcome).code == codes.MISSING_EXPECTED_CONTENT


def test_marker_must_prefix_the_top_level_message(
    classifier: FrameworkFailureClassifier,
) -> None:
    """The body-missing marker only counts at the start of the message."""
    failure = MessageNotReadableFailure("Parse error: Required request body is missing")

    assert _only_entry(classifier.classify(failure)).code == codes.MALFORMED_REQUEST


def test_unmarked_unreadable_body_maps_to_malformed_request(
    classifier: FrameworkFailureClassifier,
) -> None:
    """Without either marker, unreadable bodies should be malformed requests."""
    failure = MessageNotReadableFailure("JSON parse error: Expecting value")
    failure.__cause__ = ValueError("Expecting value: line 1 column 1 (char 0)")

    outcome = classifier.classify(failure)

    assert _only_entry(outcome).code == codes.MALFORMED_REQUEST
    assert outcome.log_details == (("exception_message", str(failure)),)


def test_unwritable_body_is_never_missing_content(
    classifier: FrameworkFailureClassifier,
) -> None:
    """Only unreadable request bodies are eligible for missing-content."""
    failure = MessageNotWritableFailure("Required request body is missing")

    assert _only_entry(classifier.classify(failure)).code == codes.MALFORMED_REQUEST


@pytest.mark.parametrize(
    ("failure", "expected_code"),
    [
        (NotAcceptableFailure(["application/json"]), codes.NO_ACCEPTABLE_REPRESENTATION),
        (UnsupportedMediaTypeFailure("text/csv"), codes.UNSUPPORTED_MEDIA_TYPE),
        (MethodNotAllowedFailure("DELETE", ["GET"]), codes.METHOD_NOT_ALLOWED),
    ],
)
def test_negotiation_failures_map_without_metadata_or_details(
    classifier: FrameworkFailureClassifier, failure: RequestFailure, expected_code: str
) -> None:
    """Negotiation failures should map to their bare canonical error."""
    outcome = classifier.classify(failure)
    entry = _only_entry(outcome)

    assert not isinstance(entry, ErrorWithContext)
    assert entry.code == expected_code
    assert outcome.log_details == ()


def test_classification_is_idempotent(classifier: FrameworkFailureClassifier) -> None:
    """Classifying the same failure twice should yield equal outcomes."""
    failure = ParameterTypeMismatchFailure("age", "twelve", int)

    assert classifier.classify(failure) == classifier.classify(failure)


def test_overlapping_rules_let_the_last_match_win_and_warn(
    classifier: FrameworkFailureClassifier, caplog: pytest.LogCaptureFixture
) -> None:
    """A failure matching two families should take the later rule and log drift."""
    with caplog.at_level(logging.WARNING, logger=_LOGGER_NAME):
        outcome = classifier.classify(_DriftedFailure())

    assert _only_entry(outcome).code == codes.METHOD_NOT_ALLOWED
    warnings = [r for r in caplog.records if r.name == _LOGGER_NAME]
    assert len(warnings) == 1
    assert getattr(warnings[0], "rules") == "not_acceptable,method_not_allowed"


def test_overlap_warning_can_be_disabled(
    registry: ProjectErrorRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    """Disabling overlap warnings should keep priority semantics silently."""
    quiet = FrameworkFailureClassifier(registry, DEFAULT_UTILS, warn_on_rule_overlap=False)

    with caplog.at_level(logging.WARNING, logger=_LOGGER_NAME):
        outcome = quiet.classify(_DriftedFailure())

    assert _only_entry(outcome).code == codes.METHOD_NOT_ALLOWED
    assert [r for r in caplog.records if r.name == _LOGGER_NAME] == []


def test_registry_statuses_flow_through_unchanged() -> None:
    """The classifier should return whatever the registry defines."""
    registry = ProjectErrorRegistry(overrides={codes.METHOD_NOT_ALLOWED: {"http_status": 404}})
    classifier = FrameworkFailureClassifier(registry, DEFAULT_UTILS)

    entry = _only_entry(classifier.classify(MethodNotAllowedFailure("PATCH")))

    assert entry.http_status == 404


def test_handled_outcome_rejects_an_empty_error_set() -> None:
    """A handled outcome must always carry at least one error."""
    with pytest.raises(ValueError, match="at least one error"):
        ClassificationOutcome.handled(ErrorSet())


def test_rule_families_carry_the_kind_they_are_listed_under(
    classifier: FrameworkFailureClassifier,
) -> None:
    """Each rule's failure family should declare the kind its rule is keyed on."""
    for kind, family in classifier.rule_families:
        assert getattr(family, "kind") is kind


def test_handled_failures_log_their_error_codes(
    classifier: FrameworkFailureClassifier, caplog: pytest.LogCaptureFixture
) -> None:
    """Classification should record the resulting error codes at debug level."""
    with caplog.at_level(logging.DEBUG, logger=_LOGGER_NAME):
        classifier.classify(MissingHeaderFailure("X-Request-Id"))

    records = [r for r in caplog.records if getattr(r, "event", None) == "failure_classified"]
    assert len(records) == 1
    assert getattr(records[0], "error_codes") == codes.MALFORMED_REQUEST
    assert getattr(records[0], "failure_type") == "MissingHeaderFailure"


def test_unhandled_failures_log_nothing(
    classifier: FrameworkFailureClassifier, caplog: pytest.LogCaptureFixture
) -> None:
    """Failures delegated onward should not emit classification records."""
    with caplog.at_level(logging.DEBUG, logger=_LOGGER_NAME):
        classifier.classify(RuntimeError("boom"))

    assert [r for r in caplog.records if r.name == _LOGGER_NAME] == []
