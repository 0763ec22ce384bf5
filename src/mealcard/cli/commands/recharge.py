"""Recharge request commands."""

import click
from mealcard.cli.error_handling import handle_domain_error
from mealcard.domain.entities import PaymentMethod, RequestStatus
from mealcard.domain.errors import DomainError
from mealcard.domain.recharge import RechargeService
from mealcard.utils.amount_parser import parse_amount


@click.group()
def recharge_group():
    """Submit and process recharge requests."""
    pass


@recharge_group.command("submit")
@click.argument("student_ref", metavar="STUDENT")
@click.argument("amount")
@click.option(
    "--method",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.UPI.value,
    show_default=True,
    help="Payment method",
)
@click.option("--txn-ref", help="Payment gateway transaction ID")
@click.option("--upi-ref", help="UPI reference")
@click.option("--screenshot", help="Reference to the proof-of-payment upload")
@click.pass_context
def submit_request(
    ctx,
    student_ref: str,
    amount: str,
    method: str,
    txn_ref: str | None,
    upi_ref: str | None,
    screenshot: str | None,
):
    """Submit a recharge request on behalf of a student.

    Examples:
        mealcard recharge submit S1001 500 --upi-ref 4123987
        mealcard recharge submit S1001 200 --method cash
    """
    service = RechargeService(ctx.obj["db"])

    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    try:
        request = service.submit(
            student_ref=student_ref,
            amount=value,
            payment_method=method,
            transaction_ref=txn_ref,
            upi_reference=upi_ref,
            screenshot_ref=screenshot,
        )
        click.echo(f"Submitted recharge request {request.id} for {request.amount} (pending)")
    except DomainError as e:
        handle_domain_error(ctx, e)


@recharge_group.command("approve")
@click.argument("request_id", type=int)
@click.option("--actor", required=True, help="Manager or admin approving the request")
@click.pass_context
def approve_request(ctx, request_id: int, actor: str):
    """Approve a pending request and credit the card."""
    service = RechargeService(ctx.obj["db"])

    try:
        record = service.approve(request_id, actor)
        click.echo(f"Approved recharge request {request_id}: credited {record.amount}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@recharge_group.command("reject")
@click.argument("request_id", type=int)
@click.option("--actor", required=True, help="Manager or admin rejecting the request")
@click.pass_context
def reject_request(ctx, request_id: int, actor: str):
    """Reject a pending request."""
    service = RechargeService(ctx.obj["db"])

    try:
        service.reject(request_id, actor)
        click.echo(f"Rejected recharge request {request_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@recharge_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in RequestStatus]), help="Filter by status")
@click.option("--student", "student_ref", help="Filter by student")
@click.pass_context
def list_requests(ctx, status: str | None, student_ref: str | None):
    """List recharge requests, newest first."""
    service = RechargeService(ctx.obj["db"])

    requests = service.list_requests(status=status, student_ref=student_ref)
    if not requests:
        click.echo("No recharge requests found.")
        return

    click.echo("\nRecharge requests:")
    click.echo("-" * 80)
    for req in requests:
        line = (
            f"ID: {req.id:3d} | {req.requested_at:%Y-%m-%d %H:%M} | {req.student_ref:10s} | "
            f"{req.amount:6d} | {req.payment_method.value:6s} | {req.status.value}"
        )
        if req.processed_by:
            line += f" by {req.processed_by}"
        click.echo(line)


def register_commands(cli):
    """Register recharge commands with main CLI."""
    cli.add_command(recharge_group, name="recharge")
