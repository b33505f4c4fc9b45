"""DeleteSession — remove a session that was never held.

The session is loaded inside the handler's unit of work, so the
SessionDeleted event it raises is still collected after the row is deleted.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from tutoring.domain import tutoring
from tutoring.session.session import Session


@tutoring.command(part_of="Session")
class DeleteSession:
    session_id = Identifier(required=True)


@tutoring.command_handler(part_of=Session)
class DeleteSessionHandler:
    @handle(DeleteSession)
    def delete_session(self, command):
        repo = current_domain.repository_for(Session)
        session = repo.get(command.session_id)
        session.delete()
        repo._dao.delete(session)
        return str(session.id)
