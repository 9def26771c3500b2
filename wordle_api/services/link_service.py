"""
Account Link Service

Binds an app identity (primary) to a voice-assistant identity (secondary)
through a short-lived numeric PIN, and resolves which identity games and
statistics are kept under.

PIN issuance and redemption are plain read-then-write sequences against the
store. Two owners drawing the same code in the same instant, or one owner
issuing twice concurrently, can leave a duplicate or a second live PIN; this
is accepted rather than guarded by a transaction.
"""

import datetime
import secrets
from typing import Any, Callable, Dict, Optional

from ..config.game_settings import PIN_LENGTH, PIN_MAX_GENERATION_TRIES
from ..errors import ExpiredPin, InvalidPin, NoLinkExists, PinGenerationFailed, SelfLinkNotAllowed
from ..models.link import LinkedAccount, LinkPin
from ..utils.helpers import isoformat, utcnow


def generate_pin_code(length: int = PIN_LENGTH) -> str:
    """Random numeric code without a leading zero."""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


class LinkService:
    """
    Handles the linking protocol:
    - generate_link_pin: issue a PIN for a primary identity
    - validate_pin_and_link: redeem a PIN from the secondary identity
    - unlink_accounts / get_link_status
    - get_effective_identity: identity under which games and stats live
    - cleanup_expired_pins: maintenance
    """

    def __init__(self, store, pin_ttl_seconds: int = 300, secondary_id_prefix: Optional[str] = None,
                 now: Callable = utcnow, code_generator: Callable[[], str] = generate_pin_code):
        self.store = store
        self.pin_ttl_seconds = pin_ttl_seconds
        self.secondary_id_prefix = secondary_id_prefix
        self.now = now
        self.code_generator = code_generator

    def generate_link_pin(self, primary_id: str) -> Dict[str, Any]:
        """
        Replace any pending PIN of ``primary_id`` with a fresh one.

        Returns:
            Dictionary with the code and its validity window
        """
        self.store.delete_pins_for_owner(primary_id)

        for _ in range(PIN_MAX_GENERATION_TRIES):
            code = self.code_generator()
            if not self.store.pin_exists(code):
                break
        else:
            raise PinGenerationFailed()

        pin = LinkPin(code=code, owner_id=primary_id, created_at=self.now())
        self.store.save_pin(pin)

        return {
            "pin": pin.code,
            "expiresIn": self.pin_ttl_seconds,
            "expiresAt": isoformat(pin.expires_at(self.pin_ttl_seconds)),
        }

    def validate_pin_and_link(self, code: str, secondary_id: str) -> LinkedAccount:
        """
        Redeem a PIN: bind ``secondary_id`` to the PIN owner, then burn the PIN.

        An expired PIN is deleted and rejected. A PIN redeemed by its own
        owner is rejected and left in place. An existing binding for
        ``secondary_id`` is replaced rather than duplicated.
        """
        pin = self.store.get_pin(code.strip())
        if pin is None:
            raise InvalidPin()

        now = self.now()
        if pin.is_expired(now, self.pin_ttl_seconds):
            self.store.delete_pin(pin.code)
            raise ExpiredPin()

        if secondary_id == pin.owner_id:
            raise SelfLinkNotAllowed()

        link = LinkedAccount(secondary_id=secondary_id, primary_id=pin.owner_id, linked_at=now)
        self.store.upsert_link(link)
        self.store.delete_pin(pin.code)
        return link

    def unlink_accounts(self, primary_id: str) -> int:
        """
        Remove every binding that references ``primary_id`` and its pending PINs.

        Returns:
            Number of bindings removed
        """
        if not self.store.find_links_for_primary(primary_id):
            raise NoLinkExists()

        removed = self.store.delete_links_for_primary(primary_id)
        self.store.delete_pins_for_owner(primary_id)
        return removed

    def get_link_status(self, user_id: str) -> Dict[str, Any]:
        links = self.store.find_links_for_primary(user_id)
        link = links[0] if links else None
        return {
            "isLinked": link is not None,
            "linkedUserId": link.secondary_id if link else None,
            "linkedAt": isoformat(link.linked_at) if link else None,
            "hasPendingPin": self.store.has_pin_for_owner(user_id),
        }

    def is_secondary_identity(self, user_id: str) -> bool:
        if self.secondary_id_prefix and user_id.startswith(self.secondary_id_prefix):
            return True
        return self.store.get_link(user_id) is not None

    def get_effective_identity(self, user_id: str) -> str:
        """
        Identity games and statistics are stored under.

        A linked primary identity resolves to its secondary identity; any
        other identity resolves to itself.
        """
        if self.is_secondary_identity(user_id):
            return user_id

        links = self.store.find_links_for_primary(user_id)
        if links:
            return links[0].secondary_id
        return user_id

    def cleanup_expired_pins(self) -> int:
        """Delete every PIN past its validity window. Safe to repeat."""
        cutoff = self.now() - datetime.timedelta(seconds=self.pin_ttl_seconds)
        return self.store.delete_pins_created_before(cutoff)


# Global service instance
_link_service = None


def get_link_service() -> Optional[LinkService]:
    """Get the global link service instance."""
    return _link_service


def initialize_link_service(store, pin_ttl_seconds: int = 300,
                            secondary_id_prefix: Optional[str] = None) -> LinkService:
    """Initialize the global link service instance."""
    global _link_service
    _link_service = LinkService(store, pin_ttl_seconds, secondary_id_prefix)
    return _link_service
