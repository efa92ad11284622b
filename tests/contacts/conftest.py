import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def contacts_bed():
    from contacts.domain import contacts

    bed = DomainFixture(contacts)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(contacts_bed):
    with contacts_bed.domain_context():
        yield
