import pytest

from bootchain.domain import ServiceLocator
from bootchain.errors import InvalidArgumentError
from bootchain.services import ServiceSet, inferred_name


class Router:
    pass


@pytest.fixture
def services():
    return ServiceSet({"clock": "clock"})


def test_is_a_service_locator(services):
    assert isinstance(services, ServiceLocator)


def test_instances_are_returned_as_registered(services):
    router = Router()
    services.set("router", router)

    assert services.has("router")
    assert services.get("router") is router
    assert services["clock"] == "clock"


def test_unknown_service_raises_key_error(services):
    assert not services.has("router")
    with pytest.raises(KeyError):
        services.get("router")


def test_factories_are_built_once_on_first_lookup(services):
    built = []

    @services.provides()
    def make_router() -> Router:
        built.append(1)
        return Router()

    assert services.has("router")
    assert built == []

    assert services.get("router") is services.get("router")
    assert len(built) == 1


def test_provides_accepts_explicit_name(services):
    @services.provides(name="cli_router")
    def make_router() -> Router:
        return Router()

    assert "cli_router" in services
    assert "router" not in services


def test_failing_factory_stays_registered(services):
    attempts = []

    @services.provides()
    def make_router() -> Router:
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("not yet")
        return Router()

    with pytest.raises(RuntimeError):
        services.get("router")

    assert isinstance(services.get("router"), Router)


def test_lookup_falls_back_to_parent(services):
    child = ServiceSet({"router": Router()}, parent=services)

    assert child.has("clock")
    assert child.get("clock") == "clock"
    assert not services.has("router")


def test_invalid_registrations_are_rejected(services):
    with pytest.raises(InvalidArgumentError):
        services.set(" ", Router())
    with pytest.raises(InvalidArgumentError):
        services.set_factory("router", Router())


def test_inferred_name():
    def make_database():
        pass

    def cache():
        pass

    assert inferred_name(make_database) == "database"
    assert inferred_name(cache) == "cache"
