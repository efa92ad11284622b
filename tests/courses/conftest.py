import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def courses_bed():
    from courses.domain import courses

    bed = DomainFixture(courses)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(courses_bed):
    with courses_bed.domain_context():
        yield
