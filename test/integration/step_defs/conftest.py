"""Shared fixtures, context and steps for BDD step definitions."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from cli.main import build_controller
from domain.models import (
    AccountCredential,
    ApplicantProfile,
    AppConfig,
    FlowLimits,
    PostingOutcome,
    RunSummary,
    SearchPlan,
)
from domain.services import ApplicationFlowController
from test.mocks import (
    FakeJobBoardPage,
    FakePosting,
    FixedClock,
    InMemoryLogger,
    RecordingNotifier,
    RecordingPacer,
    SequentialIdGenerator,
)


@dataclass
class QuickApplyContext:
    """Holds mutable state shared across BDD steps."""

    profile: ApplicantProfile = None  # type: ignore[assignment]
    page: FakeJobBoardPage = field(default_factory=FakeJobBoardPage)
    limits: FlowLimits = field(default_factory=FlowLimits)
    pacer: RecordingPacer = field(default_factory=RecordingPacer)
    logger: InMemoryLogger = field(default_factory=InMemoryLogger)
    notifier: RecordingNotifier = field(default_factory=RecordingNotifier)
    summary: RunSummary | None = None
    clock: FixedClock | None = None

    def app_config(self, search_term: str, location: str) -> AppConfig:
        return AppConfig(
            credential=AccountCredential(email=self.profile.email, password="s3cret-pass"),
            profile=self.profile,
            search=SearchPlan(search_terms=[search_term], location=location),
            limits=self.limits,
        )

    def build_controller(self, search_term: str, location: str) -> ApplicationFlowController:
        return build_controller(
            self.app_config(search_term, location),
            pacer=self.pacer,
            id_generator=SequentialIdGenerator(),
            logger=self.logger,
            notifier=self.notifier,
        )


@pytest.fixture()
def ctx() -> QuickApplyContext:
    return QuickApplyContext()


def _postings(count: int) -> list[FakePosting]:
    return [
        FakePosting(card_text=f"Engineer {i}\nAcme\nLondon", title=f"Engineer {i}")
        for i in range(1, count + 1)
    ]


def run_search(ctx: QuickApplyContext, search_term: str, location: str) -> None:
    """Run the flow controller synchronously for tests."""
    controller = ctx.build_controller(search_term, location)
    ctx.summary = asyncio.run(controller.run(ctx.page, search_term, location))


# -- Given steps ------------------------------------------------------------


@given(parsers.parse('an applicant profile with email "{email}" and phone "{phone}"'))
def given_profile(ctx: QuickApplyContext, email: str, phone: str) -> None:
    ctx.profile = ApplicantProfile(email=email, phone=phone, phone_country="United Kingdom (+44)")


@given(parsers.parse("a results page with {count:d} quick-apply postings"))
def given_results_page(ctx: QuickApplyContext, count: int) -> None:
    ctx.page.postings = _postings(count)


@given("a results page with a single quick-apply posting")
def given_single_posting(ctx: QuickApplyContext) -> None:
    ctx.page.postings = _postings(1)


# -- When steps -------------------------------------------------------------


@when(parsers.parse('the run searches for "{search_term}" in "{location}"'))
def when_run_searches(ctx: QuickApplyContext, search_term: str, location: str) -> None:
    run_search(ctx, search_term, location)


# -- Then steps -------------------------------------------------------------


@then(parsers.parse('posting {index:d} ends as "{outcome}"'))
def then_posting_outcome(ctx: QuickApplyContext, index: int, outcome: str) -> None:
    assert ctx.summary is not None
    result = ctx.summary.results[index - 1]
    assert result.index == index
    assert result.outcome is PostingOutcome(outcome)


@then(parsers.parse("the attempted count is {count:d}"))
def then_attempted_count(ctx: QuickApplyContext, count: int) -> None:
    assert ctx.summary is not None
    assert ctx.summary.attempted == count


@then(parsers.parse('the console shows "{fragment}"'))
def then_console_shows(ctx: QuickApplyContext, fragment: str) -> None:
    assert ctx.notifier.contains(fragment), ctx.notifier.info_messages
