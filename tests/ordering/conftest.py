import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _reset_adapters():
    """Every test starts with the default notifier and status backends."""
    from ordering.backend import reset_backends
    from ordering.notifier import reset_notifier

    yield
    reset_notifier()
    reset_backends()


@pytest.fixture()
def notifier():
    from ordering.notifier import FakeNotifier, set_notifier

    fake = FakeNotifier()
    set_notifier(fake)
    return fake
