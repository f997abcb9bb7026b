"""Run one game from setup to month 240 without a player and log what happens."""

import argparse
import logging
import random

from investsim.data_source import HttpDataSource, LocalDataSource, default_data_source
from investsim.game.run_controller import RunController
from investsim.game.session import start_session

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Simulate a full 20-year run against the historical data set."
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducibility (default: unseeded)",
    )
    parser.add_argument(
        "--data", type=str, default=None,
        help="Data directory or http(s) base URL (default: INVESTSIM_DATA_DIR / INVESTSIM_DATA_URL)",
    )
    parser.add_argument(
        "--savings", type=float, default=0.0,
        help="Cash moved into savings as soon as the account opens (default: 0)",
    )
    args = parser.parse_args()

    if args.data is None:
        source = default_data_source()
    elif args.data.startswith(("http://", "https://")):
        source = HttpDataSource(args.data)
    else:
        source = LocalDataSource(args.data)

    logger.info("=== STEP 1: Build session ===")
    rng = random.Random(args.seed) if args.seed is not None else None
    result = start_session(source, rng)
    if not result.ok:
        logger.error("Cannot start: %s", result.error)
        return 1
    session = result.session

    logger.info("Window: %d-%d", session.window.start_year, session.window.end_year)
    for key, instruments in session.assets.items():
        logger.info("  %s: %s", key, ", ".join(i.display_name for i in instruments))

    logger.info("=== STEP 2: Play %d scheduled events ===", len(session.schedule))
    run = RunController(session, pause_on_events=False)
    run.start()
    if args.savings > 0:
        run.deposit_savings(min(args.savings, run.portfolio.cash))

    while not run.finished:
        run.run(sleep=lambda _: None)
        if run.pending_expense is not None:
            # Nobody to sell anything: take it out of savings if possible
            shortfall = -(run.pending_expense.amount or 0.0) - run.portfolio.cash
            if shortfall > run.portfolio.savings:
                logger.warning("Month %d: cannot cover %s, stopping",
                               run.month, run.pending_expense.message)
                break
            run.withdraw_savings(shortfall)
            run.settle_pending_expense()
            run.resume()

    logger.info("=== SIMULATION COMPLETE ===")
    logger.info("  Months played: %d", run.month)
    logger.info("  Events: %d", len(run.events))
    logger.info("  Cash: %.2f  Savings: %.2f", run.portfolio.cash, run.portfolio.savings)
    logger.info("  Net worth: %.2f", run.net_worth())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
