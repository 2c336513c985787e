import pytest

from bootchain.bootstrap import Bootstrap
from bootchain.container import Container
from bootchain.environment import Environment
from bootchain.errors import InvalidArgumentError, UnresolvableError
from bootchain.module import Module
from bootchain.services import ServiceSet


@pytest.fixture
def calls():
    return []


def test_defaults_to_empty_container_and_development():
    bootstrap = Bootstrap.init()

    assert isinstance(bootstrap.container, Container)
    assert len(bootstrap.container) == 0
    assert bootstrap.environment.is_(Environment.DEVELOPMENT)


def test_init_accepts_raw_inputs():
    bootstrap = Bootstrap.init({"a": 1}, "staging")

    assert bootstrap.container.get("a") == 1
    assert bootstrap.environment.is_("staging")

    detected = Bootstrap.init(environment=lambda: "test")
    assert detected.environment.is_("test")


def test_init_keeps_prebuilt_instances():
    container = Container()
    environment = Environment("test")

    bootstrap = Bootstrap.init(container, environment)

    assert bootstrap.container is container
    assert bootstrap.environment is environment


@pytest.mark.parametrize("container", ["a=1", ["a"], 3])
def test_init_rejects_invalid_container(container):
    with pytest.raises(InvalidArgumentError):
        Bootstrap.init(container)


@pytest.mark.parametrize("environment", [3, ["test"], ""])
def test_init_rejects_invalid_environment(environment):
    with pytest.raises(InvalidArgumentError):
        Bootstrap.init(None, environment)


def test_setters_coerce_raw_input():
    bootstrap = Bootstrap()
    bootstrap.container = {"b": 2}
    bootstrap.environment = "production"

    assert bootstrap.container.get("b") == 2
    assert bootstrap.environment.is_("production")


def test_modules_run_once_in_insertion_order(calls):
    bootstrap = (
        Bootstrap.init()
        .add_module(lambda: calls.append(1))
        .add_module(Module(lambda: calls.append(2)))
        .add_module([lambda: calls.append(3)])
    )
    assert len(bootstrap) == 3

    assert bootstrap.execute() is bootstrap
    assert calls == [1, 2, 3]
    assert len(bootstrap) == 0

    bootstrap.execute()
    assert calls == [1, 2, 3]


def test_later_modules_observe_earlier_writes(calls):
    def configure(container: Container):
        container.set("log_level", "DEBUG")

    Bootstrap.init().add_module(configure).add_module(["log_level", calls.append]).execute()

    assert calls == ["DEBUG"]


def test_modules_are_gated_by_environment(calls):
    Bootstrap.init(environment="Staging") \
        .add_module(lambda: calls.append("always")) \
        .add_module(lambda: calls.append("production"), "production") \
        .add_module(lambda: calls.append("staging"), "staging") \
        .add_module(lambda: calls.append("detected"), Environment(lambda: "STAGING")) \
        .execute()

    assert calls == ["always", "staging", "detected"]


def test_failure_aborts_the_chain(calls):
    bootstrap = (
        Bootstrap.init()
        .add_module(lambda: calls.append(1))
        .add_module(lambda missing: calls.append(2))
        .add_module(lambda: calls.append(3))
    )

    with pytest.raises(UnresolvableError, match='"missing"'):
        bootstrap.execute()

    assert calls == [1]
    assert len(bootstrap) == 0

    bootstrap.execute()
    assert calls == [1]


def test_invalid_module_is_rejected_when_added():
    with pytest.raises(InvalidArgumentError):
        Bootstrap.init().add_module("not a module")
    with pytest.raises(InvalidArgumentError):
        Bootstrap.init().add_module(lambda: None, "")


def test_module_decorator(calls):
    services = ServiceSet({"router": "router"})
    bootstrap = Bootstrap.init({"di": services}, "test")

    @bootstrap.module()
    def configure(container: Container):
        container.set("ready", True)

    @bootstrap.module("ready", "@router")
    def register_routes(ready, router):
        calls.append((ready, router))

    @bootstrap.module(environment="production")
    def enable_cache():
        calls.append("cache")

    assert [m.name for m in bootstrap.modules] == [
        configure.__qualname__,
        register_routes.__qualname__,
        enable_cache.__qualname__,
    ]
    assert bootstrap.modules[1].specified

    bootstrap.execute()

    assert calls == [(True, "router")]
