import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before any domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Domains, initialized once per session
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def tutoring_bed():
    from tutoring.domain import tutoring

    bed = DomainFixture(tutoring)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def reviews_bed():
    from reviews.domain import reviews

    bed = DomainFixture(reviews)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def tutors_bed():
    from tutors.domain import tutors

    bed = DomainFixture(tutors)
    bed.setup()
    yield bed
    bed.teardown()


def _reset_data(domain):
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()
        for _, broker in domain.brokers.items():
            broker._data_reset()
        domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def run_around_tests(tutoring_bed, reviews_bed, tutors_bed):
    """Clear every domain's stores after each test."""
    yield

    from reviews.domain import reviews
    from tutoring.domain import tutoring
    from tutors.domain import tutors

    for domain in (tutoring, reviews, tutors):
        _reset_data(domain)


@pytest.fixture(autouse=True)
def gate():
    """A fresh review gate per test."""
    from reviews.review.gate import get_gate, reset_gate

    reset_gate()
    yield get_gate()
    reset_gate()


# ---------------------------------------------------------------------------
# Event delivery between contexts
# ---------------------------------------------------------------------------
# Tests run no Engine. These fixtures do its two jobs by hand: the publish
# step of the OutboxProcessor (claim, publish, mark published) and the
# stream subscriptions that hand each message to the subscribed handler.
def _subscriptions():
    from reviews.domain import reviews
    from reviews.review.tutoring_events import TutoringEventsHandler
    from tutors.domain import tutors
    from tutors.rating.review_events import ReviewEventsHandler

    return {
        TutoringEventsHandler.meta_.stream_category: (reviews, TutoringEventsHandler),
        ReviewEventsHandler.meta_.stream_category: (tutors, ReviewEventsHandler),
    }


@pytest.fixture()
def publish_outbox():
    """Claim ``domain``'s ready outbox rows, mark them published, return the broker messages."""
    from protean.core.unit_of_work import UnitOfWork
    from protean.utils.eventing import Message

    def _publish(domain) -> list[dict]:
        messages = []
        with domain.domain_context():
            repo = domain._get_outbox_repo("default")
            claimed = sorted(repo.claim_batch(worker_id="tests", limit=500), key=lambda row: row.created_at)
            for row in claimed:
                messages.append(Message(data=row.data, metadata=row.metadata_).to_dict())
                with UnitOfWork():
                    row = repo.get(row.id)
                    row.mark_published()
                    repo.add(row)
        return messages

    return _publish


@pytest.fixture()
def consume():
    """Hand broker messages to the handler subscribed to their stream category."""
    from protean.utils.eventing import Message

    def _consume(messages) -> int:
        subscriptions = _subscriptions()
        handled = 0
        for raw in messages:
            message = Message.deserialize(raw)
            subscription = subscriptions.get(message.metadata.domain.stream_category)
            if subscription is None:
                continue
            domain, handler_cls = subscription
            with domain.domain_context():
                handler_cls._handle(message)
            handled += 1
        return handled

    return _consume


@pytest.fixture()
def deliver(publish_outbox, consume):
    """Publish every pending message of ``domain`` and consume it downstream."""

    def _deliver(domain) -> int:
        return consume(publish_outbox(domain))

    return _deliver
