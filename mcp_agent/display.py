"""Display helpers for agent replies.

Agent replies are shown verbatim in the dashboard chat, so values are
rendered the way the dashboard renders them (pt-BR labels, BRL currency).
"""

from decimal import Decimal, InvalidOperation

CAMPAIGN_STATUS_DISPLAY = {
    "draft": "Rascunho",
    "active": "Ativa",
    "paused": "Pausada",
    "completed": "Concluída",
    "archived": "Arquivada",
}

MISSING_VALUE = "N/D"


def display_campaign_status(v):
    if not v:
        return "N/A"
    return CAMPAIGN_STATUS_DISPLAY.get(v, v)


def format_currency(value):
    """Format a number as BRL, e.g. ``R$ 1.234,50``. Non-numeric values give ``N/D``."""
    if value is None or isinstance(value, bool):
        return MISSING_VALUE
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return MISSING_VALUE
    if not amount.is_finite():
        return MISSING_VALUE

    # 1,234.50 -> 1.234,50
    formatted = "{:,.2f}".format(amount).replace(",", "_").replace(".", ",").replace("_", ".")
    return "R$ {}".format(formatted)
