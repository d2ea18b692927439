"""User-facing failure messages, one table per locale."""

from typing import Dict

ADD_FAILED = "add_failed"
REMOVE_FAILED = "remove_failed"
STOCK_EXCEEDED = "stock_exceeded"
UPDATE_FAILED = "update_failed"

DEFAULT_LOCALE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        ADD_FAILED: "Failed to add product",
        REMOVE_FAILED: "Failed to remove product",
        STOCK_EXCEEDED: "Requested quantity exceeds stock",
        UPDATE_FAILED: "Failed to change product quantity",
    },
    "pt-BR": {
        ADD_FAILED: "Erro na adição do produto",
        REMOVE_FAILED: "Erro na remoção do produto",
        STOCK_EXCEEDED: "Quantidade solicitada fora de estoque",
        UPDATE_FAILED: "Erro na alteração de quantidade do produto",
    },
}


def get_message(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Look up a message, falling back to the default locale."""
    table = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    return table[key]
