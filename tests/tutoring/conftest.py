import pytest


@pytest.fixture(autouse=True)
def _ctx(tutoring_bed):
    with tutoring_bed.domain_context():
        yield
