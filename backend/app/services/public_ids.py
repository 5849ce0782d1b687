"""Short public identifiers derived from sequential primary keys."""

from hashids import Hashids

from app.core.config import settings


def _hashids() -> Hashids:
    return Hashids(salt=settings.HASHIDS_SALT, min_length=settings.HASHIDS_MIN_LENGTH)


def encode_public_id(pk: int) -> str:
    """Encode a persisted integer id as a short public token."""
    return _hashids().encode(pk)
