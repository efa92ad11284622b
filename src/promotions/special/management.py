"""Special management: save (create or update) and delete."""

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from promotions.domain import promotions
from promotions.special.special import Special

logger = structlog.get_logger(__name__)


@promotions.command(part_of="Special")
class SaveSpecial:
    special_id = Identifier()
    title = String(required=True, max_length=200)
    description = Text()
    scope = String(required=True, max_length=20)
    target_ids = Text()  # JSON list
    discount_type = String(required=True, max_length=20)
    discount_value = Float(required=True)
    starts_at = DateTime(required=True)
    ends_at = DateTime(required=True)
    is_active = Boolean(default=True)


@promotions.command(part_of="Special")
class DeleteSpecial:
    special_id = Identifier(required=True)


@promotions.command_handler(part_of=Special)
class ManageSpecialHandler:
    @handle(SaveSpecial)
    def save_special(self, command):
        repo = current_domain.repository_for(Special)
        details = {
            "title": command.title.strip(),
            "description": command.description,
            "scope": command.scope,
            "target_ids": command.target_ids or "[]",
            "discount_type": command.discount_type,
            "discount_value": command.discount_value,
            "starts_at": command.starts_at,
            "ends_at": command.ends_at,
            "is_active": command.is_active,
        }

        if command.special_id:
            special = repo.get(command.special_id)
            special.revise(**details)
        else:
            special = Special.create(**details)

        repo.add(special)
        logger.info("Special saved", special_id=str(special.id), scope=special.scope)
        return str(special.id)

    @handle(DeleteSpecial)
    def delete_special(self, command):
        repo = current_domain.repository_for(Special)
        special = repo.get(command.special_id)
        repo._dao.delete(special)
        logger.info("Special deleted", special_id=str(special.id))
