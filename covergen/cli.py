import json

import click
from flask.cli import with_appcontext

from covergen.extensions import db
from covergen.models import User, WebhookEvent
from covergen.billing.dispatcher import EventDispatcher
from covergen.billing.event_store import mark_processed
from covergen.billing.events import parse_event, EventSchemaError
from covergen.billing.standing import get_standing
from covergen.billing.usage import check_usage


@click.group()
def accounts():
    """Account management."""


@accounts.command("create")
@click.option("--email", required=True)
@with_appcontext
def accounts_create(email):
    email = email.strip().lower()
    if db.session.query(User).filter_by(email=email).count():
        raise click.ClickException("Account already exists")

    user = User(email=email, is_active=True)
    db.session.add(user)
    db.session.commit()

    click.echo(f"Account created id={user.id} email={user.email}")


@click.group()
def billing():
    """Subscription ledger ops."""


@billing.command("standing")
@click.option("--account-id", required=True)
@with_appcontext
def billing_standing(account_id):
    standing = get_standing(account_id)
    usage = check_usage(account_id, standing=standing)
    out = standing.to_dict()
    out["usage"] = usage.to_dict()
    click.echo(json.dumps(out, indent=2, sort_keys=True))


@billing.command("replay")
@click.option("--event-id", type=int, required=True, help="webhook_events.id to re-dispatch")
@with_appcontext
def billing_replay(event_id):
    """Re-run a stored webhook event through the dispatcher (idempotent)."""
    row = db.session.get(WebhookEvent, event_id)
    if not row:
        raise click.ClickException(f"Webhook event {event_id} not found")
    try:
        event = parse_event(row.data)
    except EventSchemaError as e:
        raise click.ClickException(str(e))

    outcome = EventDispatcher(db.session).dispatch(event)
    mark_processed(row.id, outcome, "replayed")
    click.echo(f"Replayed event {event_id} type={event.type} outcome={outcome}")


def register_cli(app):
    app.cli.add_command(accounts)
    app.cli.add_command(billing)
