"""Invitation codec: one ``Invitation`` thing per offer in a notifications document."""

import logging

from pydantic import ValidationError

from podcatalog.codec.terms import FieldSpec, FieldType, read_fields, write_fields
from podcatalog.codec.vocab import DCTERMS, DS, RDF_TYPE
from podcatalog.errors import ParseError
from podcatalog.models.document import Document, Term, Thing
from podcatalog.models.invitation import Invitation

logger = logging.getLogger(__name__)

_INVITATION_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("from_user", DS.fromUser),
    FieldSpec("to_user", DS.toUser),
    FieldSpec("data_space_id", DS.dataSpaceId),
    FieldSpec("data_space_title", DS.dataSpaceTitle),
    FieldSpec("data_space_tenant", DS.dataSpaceTenant),
    FieldSpec("role", DS.invitedRole),
    FieldSpec("status", DS.invitationStatus),
    FieldSpec("created_at", DCTERMS.created, FieldType.DATETIME),
    FieldSpec("responded_at", DS.respondedAt, FieldType.DATETIME),
)


def invitation_iri(notifications_uri: str, invitation_id: str) -> str:
    return f"{notifications_uri}#{invitation_id}"


def encode_invitation(invitation: Invitation, notifications_uri: str) -> Thing:
    thing = Thing(iri=invitation_iri(notifications_uri, invitation.id))
    thing.set(RDF_TYPE, [Term.iri(DS.Invitation)])
    write_fields(thing, invitation.model_dump(), _INVITATION_FIELDS)
    return thing


def decode_invitation(thing: Thing) -> Invitation:
    """Rebuild one invitation.

    Raises:
        ParseError: If required fields are missing or invalid.
    """
    values = read_fields(thing, _INVITATION_FIELDS)
    try:
        return Invitation(id=thing.fragment, **values)
    except ValidationError as exc:
        msg = f"Invalid invitation {thing.iri}: {exc}"
        raise ParseError(msg) from exc


def decode_invitations(doc: Document) -> list[Invitation]:
    """All well-formed invitations in ``doc``; malformed ones are skipped."""
    invitations: list[Invitation] = []
    for thing in doc.things_of_type(DS.Invitation):
        try:
            invitations.append(decode_invitation(thing))
        except ParseError:
            logger.warning("Skipping malformed invitation %s", thing.iri)
    return invitations
