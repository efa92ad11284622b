import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def promotions_bed():
    from promotions.domain import promotions

    bed = DomainFixture(promotions)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(promotions_bed):
    with promotions_bed.domain_context():
        yield
