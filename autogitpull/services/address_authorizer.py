"""Allow-list checks for networked deployment triggers."""

from typing import Iterable, Optional

from autogitpull.models.config import AllowListEntry, ipv4_to_int

ADDRESS_MASK = 0xFFFFFFFF


def prefix_mask(prefix: int) -> int:
    """32-bit netmask for a prefix length."""
    wildcard = (1 << (32 - prefix)) - 1
    return ~wildcard & ADDRESS_MASK


def is_in_range(address: int, entry: AllowListEntry) -> bool:
    """Check whether a 32-bit address falls inside an entry's range."""
    mask = prefix_mask(entry.prefix)
    return (address & mask) == (entry.network & mask)


def find_matching_entry(
    address: Optional[str], allow_list: Iterable[AllowListEntry]
) -> Optional[AllowListEntry]:
    """Return the first entry covering the address, or None."""
    value = ipv4_to_int(address)
    if value is None:
        return None
    for entry in allow_list:
        if is_in_range(value, entry):
            return entry
    return None


def is_permitted(address: Optional[str], allow_list: Iterable[AllowListEntry]) -> bool:
    """
    Check whether a caller address may trigger a deployment.

    Malformed or missing addresses are never permitted.
    """
    return find_matching_entry(address, allow_list) is not None


class AddressAuthorizer:
    """Allow-list bound to one deployment configuration."""

    def __init__(self, allow_list: Iterable[AllowListEntry]):
        self.allow_list = tuple(allow_list)

    def is_permitted(self, address: Optional[str]) -> bool:
        return is_permitted(address, self.allow_list)

    def matching_entry(self, address: Optional[str]) -> Optional[AllowListEntry]:
        return find_matching_entry(address, self.allow_list)
