from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from domain.models import AppConfig
from domain.ports import IdGeneratorPort, LoggerPort, NotifierPort, PacerPort
from domain.services import (
    ApplicationFlowController,
    DistractionHandler,
    EligibilityFilter,
    PostingDetailLoader,
    RunScheduler,
    WizardStepExecutor,
)
from infra.browser import PlaywrightJobBoardSession
from infra.config import FileSystemConfigProvider
from infra.interaction import ConsoleNotifier
from infra.runtime import RandomPacer, StructuredLogger, SystemClock, UuidIdGenerator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quick-apply",
        description="Search the job board on a schedule and submit quick-apply applications.",
    )
    parser.add_argument("--config-dir", default="./config", help="Path to config folder")
    parser.add_argument("--headless", action="store_true", default=None)
    parser.add_argument("--no-headless", dest="headless", action="store_false")
    parser.add_argument(
        "--max-cycles",
        type=int,
        default=None,
        help="Stop after this many scheduling cycles (default: run forever)",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate config.json and profile.json, then exit",
    )
    return parser


def build_controller(
    cfg: AppConfig,
    *,
    pacer: PacerPort,
    id_generator: IdGeneratorPort,
    logger: LoggerPort,
    notifier: NotifierPort,
) -> ApplicationFlowController:
    return ApplicationFlowController(
        eligibility=EligibilityFilter(),
        distractions=DistractionHandler(
            pacer=pacer,
            logger=logger,
            notifier=notifier,
            pacing=cfg.pacing,
        ),
        detail_loader=PostingDetailLoader(
            pacer=pacer,
            logger=logger,
            pacing=cfg.pacing,
            limits=cfg.limits,
        ),
        wizard=WizardStepExecutor(
            profile=cfg.profile,
            pacer=pacer,
            logger=logger,
            notifier=notifier,
            pacing=cfg.pacing,
        ),
        pacer=pacer,
        id_generator=id_generator,
        logger=logger,
        notifier=notifier,
        pacing=cfg.pacing,
        limits=cfg.limits,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config_provider = FileSystemConfigProvider(args.config_dir)

    errors = config_provider.validate()
    if errors:
        print("Config validation failed:")
        for err in errors:
            print(f"  - {err}")
        return 1

    cfg = config_provider.get_config()
    print(f"Config OK: login={cfg.credential.email}, terms={', '.join(cfg.search.search_terms)}")
    print(f"Operating window: {cfg.window.describe()}")
    if args.validate_only:
        return 0

    headless = cfg.headless if args.headless is None else args.headless
    return asyncio.run(_run(cfg, headless=headless, max_cycles=args.max_cycles))


async def _run(cfg: AppConfig, *, headless: bool, max_cycles: int | None) -> int:
    logger = StructuredLogger()
    notifier = ConsoleNotifier()
    pacer = RandomPacer()
    session = PlaywrightJobBoardSession(
        base_url=cfg.base_url,
        headless=headless,
        search_filters=cfg.search.filters,
    )

    await session.launch()
    try:
        await session.login(cfg.credential)
        logger.info("logged_in", email=cfg.credential.email)
        await notifier.send_info("🔐 Logged in")

        scheduler = RunScheduler(
            controller=build_controller(
                cfg,
                pacer=pacer,
                id_generator=UuidIdGenerator(),
                logger=logger,
                notifier=notifier,
            ),
            page=session,
            plan=cfg.search,
            window=cfg.window,
            clock=SystemClock(),
            pacer=pacer,
            logger=logger,
            notifier=notifier,
        )
        await scheduler.run_forever(max_cycles=max_cycles)
        return 0
    finally:
        await session.close()


if __name__ == "__main__":
    raise SystemExit(main())
