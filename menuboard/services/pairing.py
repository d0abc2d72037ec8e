"""
Pairing codes: short, human-typable tokens that bind an unauthenticated
display client to a Display record.
"""
import logging
import secrets
import string
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menuboard.core.config import get_settings
from menuboard.core.errors import CodeSpaceExhausted, DuplicateCode, NotFound
from menuboard.models.display import Display

logger = logging.getLogger(__name__)

PAIRING_ALPHABET = string.ascii_uppercase + string.digits


class PairingCodeService:
    """
    Generates, resolves and rotates display pairing codes.

    Uniqueness is checked against the store before a code is accepted; the
    unique index on ``displays.pairing_code`` still decides races between
    concurrent writers, which surface as ``DuplicateCode``.
    """

    def __init__(self, db: Session, length: Optional[int] = None, max_attempts: Optional[int] = None):
        settings = get_settings()
        self.db = db
        self.length = length or settings.PAIRING_CODE_LENGTH
        self.max_attempts = max_attempts or settings.PAIRING_CODE_MAX_ATTEMPTS

    def random_code(self) -> str:
        return "".join(secrets.choice(PAIRING_ALPHABET) for _ in range(self.length))

    def is_in_use(self, code: str) -> bool:
        stmt = select(Display.id).where(Display.pairing_code == code)
        return self.db.execute(stmt).first() is not None

    def generate(self) -> str:
        """
        Return a code no display currently holds.

        Raises:
            CodeSpaceExhausted: every attempt collided with an existing code
        """
        for attempt in range(1, self.max_attempts + 1):
            code = self.random_code()
            if not self.is_in_use(code):
                return code
            logger.warning(f"Pairing code collision on attempt {attempt}/{self.max_attempts}")
        raise CodeSpaceExhausted(
            message=f"No free pairing code found after {self.max_attempts} attempts"
        )

    def resolve(self, code: str) -> Display:
        """Exact, case-sensitive lookup of the display holding ``code``."""
        display = None
        if code:
            display = self.db.execute(
                select(Display).where(Display.pairing_code == code)
            ).scalar_one_or_none()
        if display is None:
            raise NotFound("Invalid pairing code")
        return display

    def assign(self, display: Display) -> Display:
        """Give a new display its code if it does not have one yet."""
        if not display.pairing_code:
            display.pairing_code = self.generate()
        return display

    def commit(self) -> None:
        """Commit pending display writes, reporting unique-code races as DuplicateCode."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if "pairing_code" in str(e.orig):
                logger.warning(f"Pairing code race lost: {e.orig}")
                raise DuplicateCode(message="Another display claimed the same pairing code; retry the request")
            raise

    def regenerate(self, display_id: UUID) -> str:
        """
        Replace a display's code in a single committed update.

        The old code stops resolving at the same commit that makes the new
        one resolve.
        """
        display = self.db.get(Display, display_id)
        if display is None:
            raise NotFound("Display not found")
        return self.rotate(display)

    def rotate(self, display: Display) -> str:
        display.pairing_code = self.generate()
        self.commit()
        logger.info(f"Pairing code for display {display.id} rotated")
        return display.pairing_code
