"""CompleteSession — the tutor marks a confirmed session as held.

Completion is what makes a session reviewable. SessionCompleted goes to the
outbox in the same unit of work as the status change.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from tutoring.domain import tutoring
from tutoring.session.session import Session


@tutoring.command(part_of="Session")
class CompleteSession:
    session_id = Identifier(required=True)


@tutoring.command_handler(part_of=Session)
class CompleteSessionHandler:
    @handle(CompleteSession)
    def complete_session(self, command):
        repo = current_domain.repository_for(Session)
        session = repo.get(command.session_id)
        session.complete()
        repo.add(session)
        return str(session.id)
