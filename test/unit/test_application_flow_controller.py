from __future__ import annotations

import asyncio

from domain.models import (
    ApplicantProfile,
    Capability,
    FlowLimits,
    PacingPolicy,
    PostingOutcome,
    RunSummary,
)
from domain.services import (
    ApplicationFlowController,
    DistractionHandler,
    EligibilityFilter,
    PostingDetailLoader,
    WizardStepExecutor,
)
from test.mocks import (
    FakeJobBoardPage,
    FakePosting,
    InMemoryLogger,
    RecordingNotifier,
    RecordingPacer,
    SequentialIdGenerator,
    wizard_steps,
)

_PROFILE = ApplicantProfile(
    email="ada@example.com",
    phone="07700900123",
    phone_country="United Kingdom (+44)",
)


class _Harness:
    def __init__(self, limits: FlowLimits | None = None) -> None:
        self.pacer = RecordingPacer()
        self.logger = InMemoryLogger()
        self.notifier = RecordingNotifier()
        pacing = PacingPolicy()
        limits = limits or FlowLimits()
        self.controller = ApplicationFlowController(
            eligibility=EligibilityFilter(),
            distractions=DistractionHandler(
                pacer=self.pacer, logger=self.logger, notifier=self.notifier, pacing=pacing,
            ),
            detail_loader=PostingDetailLoader(
                pacer=self.pacer, logger=self.logger, pacing=pacing, limits=limits,
            ),
            wizard=WizardStepExecutor(
                profile=_PROFILE,
                pacer=self.pacer,
                logger=self.logger,
                notifier=self.notifier,
                pacing=pacing,
            ),
            pacer=self.pacer,
            id_generator=SequentialIdGenerator(),
            logger=self.logger,
            notifier=self.notifier,
            pacing=pacing,
            limits=limits,
        )

    def run(self, page: FakeJobBoardPage) -> RunSummary:
        return asyncio.run(self.controller.run(page, "Java", "United Kingdom"))


def _mixed_results_page() -> FakeJobBoardPage:
    return FakeJobBoardPage(
        postings=[
            FakePosting(card_text="Platform Engineer\nInitech\nPromoted"),
            FakePosting(card_text="Java Developer\nGlobex\nApplied 3 days ago"),
            FakePosting(card_text="Data Engineer\nHooli\nPromoted"),
            FakePosting(
                card_text="Backend Engineer\nAcme\nLondon",
                title="Backend Engineer",
                wizard=wizard_steps(
                    {Capability.EMAIL_SELECT, Capability.NEXT},
                    {Capability.PHONE_COUNTRY_SELECT, Capability.PHONE_NUMBER_INPUT, Capability.NEXT},
                    {Capability.REVIEW},
                    {Capability.SUBMIT},
                ),
            ),
            FakePosting(card_text="Frontend Engineer\nUmbrella\nLeeds", quick_apply=False),
        ],
    )


def test_mixed_results_page_outcomes() -> None:
    harness = _Harness()
    page = _mixed_results_page()

    summary = harness.run(page)

    assert [r.outcome for r in summary.results] == [
        PostingOutcome.SKIPPED_PROMOTED,
        PostingOutcome.SKIPPED_ALREADY_APPLIED,
        PostingOutcome.SKIPPED_PROMOTED,
        PostingOutcome.SUBMITTED,
        PostingOutcome.SKIPPED_NOT_QUICK_APPLY,
    ]
    assert summary.attempted == 1
    assert summary.submitted == 1
    assert summary.skipped == 4
    assert summary.run_id == "run-1"
    assert page.opened_searches == [("Java", "United Kingdom")]
    assert page.submitted_indexes == [4]


def test_skipped_cards_are_never_selected() -> None:
    page = _mixed_results_page()

    _Harness().run(page)

    assert page.selected_indexes == [4, 5]
    assert all(index in (4, 5) for index, _ in page.clicks)


def test_each_posting_is_visited_once_in_order() -> None:
    summary = _Harness().run(_mixed_results_page())

    assert summary.visited_indexes == [1, 2, 3, 4, 5]


def test_submitted_result_carries_detail_and_step_count() -> None:
    summary = _Harness().run(_mixed_results_page())

    submitted = summary.results[3]
    assert submitted.detail is not None
    assert submitted.detail.title == "Backend Engineer"
    assert submitted.steps == 2
    assert submitted.attempted


def test_wizard_fills_profile_values() -> None:
    page = _mixed_results_page()

    _Harness().run(page)

    assert page.fills == [
        (4, Capability.EMAIL_SELECT, "ada@example.com"),
        (4, Capability.PHONE_COUNTRY_SELECT, "United Kingdom (+44)"),
        (4, Capability.PHONE_NUMBER_INPUT, "07700900123"),
    ]


def test_progress_lines_are_reported() -> None:
    harness = _Harness()

    harness.run(_mixed_results_page())

    assert harness.notifier.info_messages[0] == "📋 Found 5 jobs:"
    assert harness.notifier.contains("⏭️ Skipping promoted job #1")
    assert harness.notifier.contains("⏭️ Skipping already applied job #2")
    assert harness.notifier.contains("🎯 Applying to 4. Backend Engineer @ Acme (London), 2 hours ago")
    assert harness.notifier.contains("✅ Submitted job #4")
    assert harness.notifier.contains("⏭️ Skipping job #5: not Easy Apply")


def test_exception_on_one_posting_does_not_stop_the_run() -> None:
    harness = _Harness()
    page = FakeJobBoardPage(
        postings=[
            FakePosting(card_text="Job A", fail_on="hover"),
            FakePosting(card_text="Job B"),
        ],
    )

    summary = harness.run(page)

    first, second = summary.results
    assert first.outcome is PostingOutcome.ERRORED
    assert not first.attempted
    assert "hover failed" in (first.error or "")
    assert second.outcome is PostingOutcome.SUBMITTED
    assert summary.errored == 1
    assert "posting_failed" in harness.logger.messages("error")
    assert harness.notifier.contains("❌ Error on job #1")


def test_card_text_failure_is_contained() -> None:
    summary = _Harness().run(
        FakeJobBoardPage(postings=[FakePosting(fail_on="text"), FakePosting()]),
    )

    assert [r.outcome for r in summary.results] == [
        PostingOutcome.ERRORED,
        PostingOutcome.SUBMITTED,
    ]


def test_click_failure_inside_wizard_is_an_attempted_error() -> None:
    harness = _Harness()
    page = FakeJobBoardPage(
        postings=[FakePosting(wizard=wizard_steps({Capability.NEXT}, {Capability.SUBMIT}))],
        click_errors={Capability.NEXT: RuntimeError("element detached")},
    )

    summary = harness.run(page)

    (result,) = summary.results
    assert result.outcome is PostingOutcome.ERRORED
    assert result.attempted
    assert result.error == "element detached"
    assert summary.attempted == 1
    assert page.submitted_indexes == []


def test_detail_pane_that_never_renders_is_skipped() -> None:
    harness = _Harness()
    page = FakeJobBoardPage(postings=[FakePosting(detail_renders=False), FakePosting()])

    summary = harness.run(page)

    assert summary.results[0].outcome is PostingOutcome.SKIPPED_DETAIL_LOAD_FAILED
    assert not summary.results[0].attempted
    assert summary.results[1].outcome is PostingOutcome.SUBMITTED
    assert harness.notifier.contains("⚠️ Skipping job #1: sidebar details failed to load")


def test_wizard_without_advance_control_is_blocked() -> None:
    page = FakeJobBoardPage(
        postings=[FakePosting(wizard=wizard_steps({Capability.NEXT}, set()))],
    )

    summary = _Harness().run(page)

    (result,) = summary.results
    assert result.outcome is PostingOutcome.BLOCKED
    assert result.attempted
    assert result.steps == 1
    assert summary.blocked == 1


def test_wizard_that_never_ends_hits_the_step_limit() -> None:
    harness = _Harness(FlowLimits(max_wizard_steps=5))
    page = FakeJobBoardPage(
        postings=[FakePosting(wizard=wizard_steps({Capability.REVIEW}), loop_last_step=True)],
    )

    summary = harness.run(page)

    assert summary.results[0].outcome is PostingOutcome.BLOCKED
    assert page.advance_clicks() == [Capability.REVIEW] * 5
    assert "wizard_step_limit_reached" in harness.logger.messages("warning")
    assert harness.notifier.contains("🛑 Gave up on job #1 after 5 wizard steps")


def test_no_postings_rendered_returns_empty_summary() -> None:
    harness = _Harness()
    page = FakeJobBoardPage(postings=[FakePosting()], postings_render=False)

    summary = harness.run(page)

    assert summary.results == ()
    assert summary.attempted == 0
    assert page.selected_indexes == []
    assert harness.notifier.contains("📭 No jobs found")


def test_login_overlay_is_closed_before_selecting_a_posting() -> None:
    harness = _Harness()
    page = FakeJobBoardPage(postings=[FakePosting()], login_overlay=True)

    summary = harness.run(page)

    assert page.clicks[0] == (0, Capability.DISMISS_LOGIN_OVERLAY)
    assert summary.submitted == 1
    assert harness.notifier.contains("🧹 Closed login modal popup")


def test_upsell_after_submit_is_dismissed() -> None:
    harness = _Harness()
    page = FakeJobBoardPage(postings=[FakePosting(), FakePosting()], upsell_after_submit=True)

    summary = harness.run(page)

    assert summary.submitted == 2
    dismissals = [index for index, cap in page.clicks if cap is Capability.DISMISS_UPSELL]
    assert dismissals == [1, 2]


def test_overlay_probe_failure_does_not_error_the_posting() -> None:
    page = FakeJobBoardPage(
        postings=[FakePosting()],
        probe_errors={Capability.DISMISS_LOGIN_OVERLAY: RuntimeError("frame detached")},
    )

    summary = _Harness().run(page)

    assert summary.results[0].outcome is PostingOutcome.SUBMITTED
