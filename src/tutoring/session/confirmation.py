"""ConfirmSession — the tutor accepts a pending booking."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from tutoring.domain import tutoring
from tutoring.session.session import Session


@tutoring.command(part_of="Session")
class ConfirmSession:
    session_id = Identifier(required=True)


@tutoring.command_handler(part_of=Session)
class ConfirmSessionHandler:
    @handle(ConfirmSession)
    def confirm_session(self, command):
        repo = current_domain.repository_for(Session)
        session = repo.get(command.session_id)
        session.confirm()
        repo.add(session)
        return str(session.id)
