"""CancelSession — either party calls off a session that has not been held."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from tutoring.domain import tutoring
from tutoring.session.session import Session


@tutoring.command(part_of="Session")
class CancelSession:
    session_id = Identifier(required=True)


@tutoring.command_handler(part_of=Session)
class CancelSessionHandler:
    @handle(CancelSession)
    def cancel_session(self, command):
        repo = current_domain.repository_for(Session)
        session = repo.get(command.session_id)
        session.cancel()
        repo.add(session)
        return str(session.id)
