import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def finance_bed():
    from finance.domain import finance

    bed = DomainFixture(finance)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(finance_bed):
    with finance_bed.domain_context():
        yield
