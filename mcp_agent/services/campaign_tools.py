"""Campaign management tool handlers for the chat agent.

Provides four tools that let the agent manage campaigns:
- create_campaign: Create a draft campaign through the CRUD API
- modify_campaign: Partially update a campaign, addressed by name or id
- list_campaigns: Summarize every campaign name
- get_campaign_details: Budget, fixed costs and period totals of one campaign

Writes go through the campaign CRUD API; name lookups and metric totals are
read straight from the database with parameterized SQL.
Registered with the tool registry at app startup.
"""

from __future__ import annotations

import logging
import math

from sqlalchemy.exc import SQLAlchemyError

from ..display import display_campaign_status, format_currency
from ..models import db
from .campaign_api import (
    CampaignApiError,
    CampaignApiNotConfigured,
    CampaignApiRejected,
    CampaignApiUnavailable,
    get_campaign_api,
)
from .tool_registry import ToolDefinition, ToolName, ToolResult

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "status",
    "budget",
    "daily_budget",
    "cost_traffic",
    "cost_creative",
    "cost_operational",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_amount(value):
    """Coerce a budget-like value to a JSON number. Returns None if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", "."))
        except ValueError:
            return None
    else:
        return None

    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def _api_failure(exc, verb):
    """Render a campaign API error as a reply."""
    if isinstance(exc, CampaignApiNotConfigured):
        return ToolResult.failed("❌ Falha: configuração interna ausente.")
    if isinstance(exc, CampaignApiUnavailable):
        return ToolResult.failed("❌ Falha de conexão interna.")
    if isinstance(exc, CampaignApiRejected):
        return ToolResult.failed("❌ Falha ao {}: {}".format(verb, exc.message or "erro da API."))
    return ToolResult.failed("❌ Falha ao {}: {}".format(verb, exc))


def find_campaign_id_by_name(name):
    """Return the id of the first campaign named exactly ``name``, or None.

    Storage errors propagate (after rollback) so callers can tell a missing
    campaign from an unreachable store.
    """
    if not name:
        return None
    try:
        row = db.session.execute(
            db.text("SELECT id FROM campaigns WHERE name = :name LIMIT 1"),
            {"name": name},
        ).fetchone()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return str(row[0]) if row else None


def _campaign_name_by_id(campaign_id):
    try:
        row = db.session.execute(
            db.text("SELECT name FROM campaigns WHERE id = :id"),
            {"id": campaign_id},
        ).fetchone()
    except SQLAlchemyError:
        logger.exception("Campaign lookup by id failed: %s", campaign_id)
        db.session.rollback()
        return None
    return row[0] if row else None


def _aggregate_metrics(campaign_id):
    """Sum cost and revenue of a campaign's daily metrics. Zeros on failure."""
    try:
        row = db.session.execute(
            db.text("""
                SELECT SUM(cost) AS total_cost, SUM(revenue) AS total_revenue
                FROM daily_metrics
                WHERE campaign_id = :id
            """),
            {"id": campaign_id},
        ).fetchone()
    except SQLAlchemyError:
        logger.exception("Metrics aggregation failed for campaign %s", campaign_id)
        db.session.rollback()
        return 0, 0
    if not row:
        return 0, 0
    return row[0] or 0, row[1] or 0


# ---------------------------------------------------------------------------
# Tool handlers
# ---------------------------------------------------------------------------


def create_campaign(args: dict) -> ToolResult:
    """Create a new draft campaign with the given daily budget."""
    name = args.get("name")
    name = name.strip() if isinstance(name, str) else ""
    budget = _parse_amount(args.get("budget"))
    if not name or budget is None or budget < 0:
        return ToolResult.invalid("❌ Falha: Nome e orçamento diário obrigatórios.")

    try:
        status, record = get_campaign_api().create(
            {"name": name, "daily_budget": budget, "status": "draft"}
        )
    except CampaignApiError as exc:
        logger.error("Campaign create failed for %r: %s", name, exc)
        return _api_failure(exc, "criar")

    if status not in (200, 201):
        return ToolResult.failed("⚠️ Erro ao criar (Status: {}).".format(status))

    campaign_id = record.get("id") if isinstance(record, dict) else None
    return ToolResult.ok('✅ Campanha "{}" (ID: {}) criada!'.format(name, campaign_id or "?"))


def modify_campaign(args: dict) -> ToolResult:
    """Apply a partial update to a campaign identified by name or id."""
    identifier = args.get("identifier")
    if isinstance(identifier, str):
        identifier = {"name": identifier}
    if not isinstance(identifier, dict):
        return ToolResult.invalid("❌ Falha: Identifique a campanha.")

    campaign_id = identifier.get("id")
    campaign_id = str(campaign_id).strip() if campaign_id not in (None, "") else None
    campaign_name = identifier.get("name")
    campaign_name = campaign_name.strip() if isinstance(campaign_name, str) else None
    if not campaign_id and not campaign_name:
        return ToolResult.invalid("❌ Falha: Identifique a campanha.")

    fields = args.get("fields_to_update")
    if not isinstance(fields, dict) or not fields:
        return ToolResult.invalid("❌ Falha: Especifique os campos a alterar.")

    ignored = [k for k in fields if k not in UPDATABLE_FIELDS]
    if ignored:
        logger.warning("modify_campaign: passing through non-standard fields %s", ignored)

    if not campaign_id:
        try:
            campaign_id = find_campaign_id_by_name(campaign_name)
        except SQLAlchemyError:
            logger.exception("Campaign lookup by name failed: %s", campaign_name)
            return ToolResult.failed("❌ Falha ao buscar a campanha.")
        if not campaign_id:
            return ToolResult.not_found('❌ Falha: Campanha "{}" não encontrada.'.format(campaign_name))

    try:
        status, _record = get_campaign_api().update(campaign_id, fields)
    except CampaignApiError as exc:
        logger.error("Campaign update failed for %s: %s", campaign_id, exc)
        return _api_failure(exc, "modificar")

    if status not in (200, 204):
        return ToolResult.failed("⚠️ Erro ao modificar (Status: {}).".format(status))

    new_name = fields.get("name")
    if isinstance(new_name, str) and new_name.strip():
        final_name = new_name.strip()
    elif campaign_name:
        final_name = campaign_name
    else:
        final_name = _campaign_name_by_id(campaign_id) or "ID {}".format(campaign_id)

    return ToolResult.ok(
        '✅ Campanha "{}" atualizada! (Campos: {})'.format(final_name, ", ".join(fields))
    )


def list_campaigns(args: dict) -> ToolResult:
    """List every campaign name."""
    try:
        records = get_campaign_api().list(fields=["name"])
    except CampaignApiError as exc:
        logger.error("Campaign list failed: %s", exc)
        return _api_failure(exc, "listar campanhas")

    names = [str(r["name"]) for r in records if r.get("name")]
    if not names:
        return ToolResult.ok("ℹ️ Nenhuma campanha encontrada.")
    return ToolResult.ok("📁 Campanhas ({}): {}.".format(len(names), ", ".join(names)))


def get_campaign_details(args: dict) -> ToolResult:
    """Summarize one campaign's budget, fixed costs and period totals."""
    name = args.get("campaign_name") or args.get("name")
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        return ToolResult.invalid("❌ Falha: Especifique o nome da campanha.")

    try:
        row = db.session.execute(
            db.text("""
                SELECT id, name, status, budget, daily_budget,
                       cost_traffic, cost_creative, cost_operational
                FROM campaigns
                WHERE name = :name
                LIMIT 1
            """),
            {"name": name},
        ).fetchone()
    except SQLAlchemyError:
        logger.exception("Campaign details lookup failed: %s", name)
        db.session.rollback()
        return ToolResult.failed("❌ Falha ao buscar detalhes da campanha.")

    if not row:
        return ToolResult.not_found('ℹ️ Campanha "{}" não encontrada.'.format(name))

    total_cost, total_revenue = _aggregate_metrics(row[0])

    return ToolResult.ok(
        '📊 Detalhes "{name}" (ID: {id}): Status {status}, '
        "Orçamento total {budget}, Orçamento diário {daily}. "
        "Custos fixos (Tráfego: {traffic}, Criativo: {creative}, Operacional: {operational}). "
        "Período (Custo {cost}, Receita {revenue}).".format(
            name=row[1],
            id=row[0],
            status=display_campaign_status(row[2]),
            budget=format_currency(row[3]),
            daily=format_currency(row[4]),
            traffic=format_currency(row[5]),
            creative=format_currency(row[6]),
            operational=format_currency(row[7]),
            cost=format_currency(total_cost),
            revenue=format_currency(total_revenue),
        )
    )


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

CAMPAIGN_TOOLS = [
    ToolDefinition(
        name=ToolName.CREATE_CAMPAIGN,
        description="Create a draft campaign from a name and a daily budget.",
        handler=create_campaign,
    ),
    ToolDefinition(
        name=ToolName.MODIFY_CAMPAIGN,
        description="Update fields of a campaign identified by name or id.",
        handler=modify_campaign,
    ),
    ToolDefinition(
        name=ToolName.LIST_CAMPAIGNS,
        description="List the names of all campaigns.",
        handler=list_campaigns,
    ),
    ToolDefinition(
        name=ToolName.GET_CAMPAIGN_DETAILS,
        description="Show budget, fixed costs and period totals of one campaign.",
        handler=get_campaign_details,
    ),
]
