"""BookSession — a student books a session with a tutor.

Session.book raises SessionCreated; the unit of work stores the new session
and the event's outbox row together, so the event is published only after
both commit.
"""

from protean.fields import Date, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from tutoring.domain import tutoring
from tutoring.session.session import Session


@tutoring.command(part_of="Session")
class BookSession:
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    subject = String(required=True, max_length=100)
    date = Date(required=True)
    time = String(required=True, max_length=8)
    price = Float(required=True)
    duration = Integer()
    modality = String()
    notes = Text()


@tutoring.command_handler(part_of=Session)
class BookSessionHandler:
    @handle(BookSession)
    def book_session(self, command):
        session = Session.book(
            tutor_id=command.tutor_id,
            student_id=command.student_id,
            subject=command.subject,
            date=command.date,
            time=command.time,
            price=command.price,
            duration=command.duration,
            modality=command.modality,
            notes=command.notes,
        )
        current_domain.repository_for(Session).add(session)
        return str(session.id)
