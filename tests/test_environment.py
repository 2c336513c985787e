import pytest

from bootchain.environment import Environment, DEVELOPMENT, ENVIRONMENT_VARIABLE
from bootchain.errors import DetectionError, DetectionWarning, InvalidArgumentError


@pytest.fixture
def calls():
    return []


@pytest.fixture
def counting_detector(calls):
    def detect():
        calls.append(1)
        return " Staging "

    return detect


def test_defaults_to_development():
    assert Environment().is_(DEVELOPMENT)


def test_fixed_value_compares_case_insensitively_and_trimmed():
    environment = Environment.of("Test ")

    assert environment.is_("test")
    assert environment.is_(" TEST")
    assert not environment.is_("production")
    assert environment == "tEsT"


@pytest.mark.parametrize("value", ["", "   ", None, 42])
def test_invalid_value_is_rejected(value):
    with pytest.raises(InvalidArgumentError):
        Environment(value)


def test_of_requires_a_string():
    with pytest.raises(InvalidArgumentError):
        Environment.of(lambda: "test")


def test_of_detector_requires_a_callable():
    with pytest.raises(InvalidArgumentError):
        Environment.of_detector("test")


def test_detector_is_deferred_and_runs_once(counting_detector, calls):
    environment = Environment.of_detector(counting_detector)
    assert not environment.resolved
    assert calls == []

    assert environment.is_("staging")
    assert environment.is_("STAGING")
    assert not environment.is_("production")
    assert str(environment) == "Staging"

    assert environment.resolved
    assert len(calls) == 1


def test_compares_with_another_environment():
    assert Environment("test").is_(Environment(lambda: "TEST"))
    assert Environment("test") == Environment(lambda: "TEST")
    assert hash(Environment("test")) == hash(Environment("TEST"))


@pytest.mark.parametrize("other", ["", "  ", None, 3])
def test_is_rejects_invalid_argument(other):
    with pytest.raises(InvalidArgumentError):
        Environment("test").is_(other)


def test_equality_with_blank_string_or_other_type_is_false():
    assert Environment("test") != ""
    assert Environment("test") != 3


def test_failing_detector_raises_on_every_comparison(calls):
    def detect():
        calls.append(1)
        raise OSError("no hostname")

    environment = Environment(detect)

    for _ in range(3):
        with pytest.raises(DetectionError) as excinfo:
            environment.is_("test")
        assert isinstance(excinfo.value.__cause__, OSError)

    assert len(calls) == 1


@pytest.mark.parametrize("result", [None, "", "  ", 12])
def test_detector_returning_invalid_value_raises(result):
    environment = Environment(lambda: result)

    with pytest.raises(DetectionError, match="returned invalid value"):
        environment.is_("test")


def test_str_reports_detection_failure_without_raising():
    environment = Environment(lambda: None)

    with pytest.warns(DetectionWarning, match="returned invalid value"):
        assert str(environment) == ""


def test_str_of_fixed_value():
    assert str(Environment(" production ")) == "production"


def test_from_variable_reads_process_environment_lazily(monkeypatch):
    monkeypatch.delenv(ENVIRONMENT_VARIABLE, raising=False)
    environment = Environment.from_variable()
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "qa")

    assert environment.is_("QA")


def test_from_variable_falls_back_to_default(monkeypatch):
    monkeypatch.delenv("APP_STAGE", raising=False)

    assert Environment.from_variable("APP_STAGE", "staging").is_("staging")


def test_from_variable_without_default_fails_detection(monkeypatch):
    monkeypatch.delenv("APP_STAGE", raising=False)

    with pytest.raises(DetectionError):
        Environment.from_variable("APP_STAGE", None).is_("staging")
