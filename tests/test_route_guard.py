"""
tests.test_route_guard

Route guard decisions per session state and capability.
"""

from __future__ import annotations

import pytest

from team_console.auth.roles import Capability
from team_console.permissions.resolver import PermissionResolver
from team_console.routing.destinations import ROUTES, Destination, resolve
from team_console.routing.guard import GuardOutcome, RouteGuard
from team_console.session.provider import SessionProvider
from tests.conftest import PASSWORD


@pytest.fixture
def guard(provider: SessionProvider) -> RouteGuard:
    return RouteGuard(session=provider, resolver=PermissionResolver(provider))


@pytest.mark.asyncio
async def test_member_without_capability_goes_to_dashboard(
    provider: SessionProvider, guard: RouteGuard, accounts
) -> None:
    await provider.login(accounts["member"].email, PASSWORD)

    decision = guard.evaluate("/admin/teams/new")

    assert decision.destination is not None
    assert decision.destination.required_capability is Capability.create_team
    assert decision.outcome is GuardOutcome.denied_forbidden
    assert decision.redirect_to == "/dashboard"


@pytest.mark.parametrize("path", ["/dashboard", "/members", "/admin/teams/new", "/finance/3/edit"])
def test_unauthenticated_goes_to_login(guard: RouteGuard, path: str) -> None:
    decision = guard.evaluate(path)

    assert decision.outcome is GuardOutcome.denied_unauthenticated
    assert decision.redirect_to == "/login"


@pytest.mark.asyncio
async def test_restore_in_flight_then_resolved(provider: SessionProvider, guard: RouteGuard) -> None:
    task = provider.start_restore()

    decision = guard.evaluate("/members")
    assert decision.outcome is GuardOutcome.evaluating
    assert decision.redirect_to is None
    assert not decision.is_terminal

    await task
    assert guard.evaluate("/dashboard").outcome is GuardOutcome.denied_unauthenticated


@pytest.mark.asyncio
async def test_permitted_with_params(provider: SessionProvider, guard: RouteGuard, accounts) -> None:
    await provider.login(accounts["team_leader"].email, PASSWORD)

    decision = guard.evaluate("/members/12/edit")

    assert decision.outcome is GuardOutcome.permitted
    assert decision.destination is not None
    assert decision.destination.name == "members.edit"
    assert decision.params == {"member_id": "12"}
    assert decision.redirect_to is None


@pytest.mark.asyncio
async def test_destination_without_capability_is_permitted(
    provider: SessionProvider, guard: RouteGuard, accounts
) -> None:
    await provider.login(accounts["advisor"].email, PASSWORD)

    assert guard.evaluate("/dashboard").outcome is GuardOutcome.permitted
    assert guard.evaluate("/settings/").outcome is GuardOutcome.permitted


def test_login_is_public(guard: RouteGuard) -> None:
    assert guard.evaluate("/login").outcome is GuardOutcome.permitted


def test_unknown_path(guard: RouteGuard) -> None:
    assert guard.evaluate("/nowhere").outcome is GuardOutcome.not_found


@pytest.mark.asyncio
async def test_decisions_are_not_cached(provider: SessionProvider, guard: RouteGuard, accounts) -> None:
    await provider.login(accounts["admin"].email, PASSWORD)
    assert guard.evaluate("/admin/users").outcome is GuardOutcome.permitted

    await provider.logout()
    assert guard.evaluate("/admin/users").outcome is GuardOutcome.denied_unauthenticated


@pytest.mark.asyncio
async def test_evaluate_destination_object(provider: SessionProvider, guard: RouteGuard, accounts) -> None:
    await provider.login(accounts["finance_director"].email, PASSWORD)
    custom = Destination("reports", "/reports", Capability.view_finance)

    assert guard.evaluate(custom).outcome is GuardOutcome.permitted


def test_static_segments_win_over_ids() -> None:
    resolved = resolve("/finance/new")
    assert resolved is not None
    assert resolved[0].name == "finance.new"

    resolved = resolve("/finance/summary")
    assert resolved is not None
    assert resolved[0].name == "finance.summary"


def test_every_destination_has_unique_name() -> None:
    names = [destination.name for destination in ROUTES]
    assert len(names) == len(set(names))
