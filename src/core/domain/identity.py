"""
Identity — адреса участников ledger

Адрес — строка вида "0x" + 40 hex. Нулевой адрес (ZERO_ADDRESS) зарезервирован:
он появляется только как источник mint и получатель burn в TransferEvent.
"""

import hashlib
import re
from typing import Any, Final

from src.core.errors import InvalidAddress


# =============================================================================
# CONSTANTS
# =============================================================================

ADDRESS_HEX_LENGTH: Final[int] = 40

ZERO_ADDRESS: Final[str] = "0x" + "0" * ADDRESS_HEX_LENGTH

CONTRACT_ADDRESS_RE: Final = re.compile(r"0x[0-9a-f]{40}")


# =============================================================================
# HELPERS
# =============================================================================


def is_zero_address(address: Any) -> bool:
    """True если адрес пустой или нулевой."""
    if not isinstance(address, str):
        return False
    normalized = address.strip().lower()
    return normalized in ("", ZERO_ADDRESS)


def normalize_address(address: Any) -> str:
    """
    Нормализация и проверка identity.

    Args:
        address: Адрес участника (строка)

    Returns:
        Адрес без пробелов в нижнем регистре

    Raises:
        InvalidAddress: Если адрес не строка, пустой или нулевой
    """
    if not isinstance(address, str) or is_zero_address(address):
        raise InvalidAddress(address)

    return address.strip().lower()


def normalize_contract_address(address: Any) -> str:
    """
    Identity ledger / координатора / faucet: строго "0x" + 40 hex.

    Raises:
        InvalidAddress: Если адрес не соответствует формату или нулевой
    """
    normalized = normalize_address(address)
    if not CONTRACT_ADDRESS_RE.fullmatch(normalized):
        raise InvalidAddress(address)
    return normalized


def derive_address(*parts: Any) -> str:
    """
    Детерминированный адрес из произвольных частей.

    Используется для identity координаторов и их species ledgers:
    одинаковые части → одинаковый адрес.

    Args:
        *parts: Части seed (приводятся к str и соединяются через ':')

    Returns:
        "0x" + первые 40 hex символов sha256(seed)
    """
    if not parts:
        raise ValueError("derive_address requires at least one part")

    seed = ":".join(str(p) for p in parts)
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()
    return "0x" + digest[:ADDRESS_HEX_LENGTH]
