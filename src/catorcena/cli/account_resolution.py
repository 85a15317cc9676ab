"""CLI helpers for card and debit account resolution."""

from __future__ import annotations

import click

from catorcena.cli.error_handling import handle_domain_error
from catorcena.domain.card import CardService
from catorcena.domain.debit import DebitAccountService
from catorcena.domain.errors import DomainError


def resolve_card_or_exit(ctx: click.Context, service: CardService, card: str) -> str:
    """Resolve card name or ID, or exit with a CLI error."""
    try:
        return service.find_card_id(card)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_debit_account_or_exit(
    ctx: click.Context, service: DebitAccountService, account: str
) -> str:
    """Resolve debit account name or ID, or exit with a CLI error."""
    try:
        return service.find_account_id(account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
