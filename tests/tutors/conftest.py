import pytest


@pytest.fixture(autouse=True)
def _ctx(tutors_bed):
    with tutors_bed.domain_context():
        yield
