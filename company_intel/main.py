"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys

from company_intel.config import Config, config
from company_intel.logging_conf import setup_logging
from company_intel.scraping.orchestrator import run_company_report, run_strategy_comparison
from company_intel.store.dev_storage import DevStorage
from company_intel.store.supabase_writer import ReportWriter

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Companies House company intelligence scraper")

    parser.add_argument(
        "--company",
        type=str,
        default=None,
        help="Company name to search for",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=config.DEFAULT_MAX_PAGES,
        help=f"Maximum filing history pages (default: {config.DEFAULT_MAX_PAGES})",
    )
    parser.add_argument(
        "--max-people-pages",
        type=int,
        default=config.DEFAULT_MAX_PEOPLE_PAGES,
        help=f"Maximum officer pages (default: {config.DEFAULT_MAX_PEOPLE_PAGES})",
    )
    parser.add_argument(
        "--no-summary",
        action="store_true",
        help="Skip the AI business-intelligence summary",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode (visible browser, verbose logs, local storage)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Save the report to Supabase",
    )
    parser.add_argument(
        "--compare-strategies",
        type=str,
        default=None,
        metavar="NUMBER",
        help="Compare filing extraction strategies for a company number and exit",
    )

    args = parser.parse_args(argv)
    if not args.company and not args.compare_strategies:
        parser.error("Must specify either --company or --compare-strategies")
    return args


async def _run(args: argparse.Namespace) -> int:
    dev_storage = DevStorage() if args.dev else None

    if args.compare_strategies:
        comparison = await run_strategy_comparison(args.compare_strategies.upper())
        for name, outcome in comparison["strategies"].items():
            logger.info(f"{name}: {outcome['filings']} filings, {outcome['links']} links")
        logger.info(f"Best strategy: {comparison['bestStrategy']}")
        if dev_storage:
            dev_storage.save_json(f"compare-{args.compare_strategies}", comparison)
        return 0

    report = await run_company_report(
        args.company,
        max_pages=args.max_pages,
        max_people_pages=args.max_people_pages,
        generate_summary=not args.no_summary,
    )
    result = report.result

    logger.info("=" * 60)
    logger.info(f"Company: {result.overview.company_name if result.overview else args.company}")
    logger.info(f"Quality score: {result.quality_score}/100")
    if result.filing:
        stats = result.filing.statistics
        logger.info(
            f"Filings: {stats.total_filings} over {result.filing.pages_scraped} pages, "
            f"{stats.document_success_rate}% with documents"
        )
    if result.people:
        logger.info(f"Officers: {result.people.total_officers} ({result.people.active_officers} active)")
    if result.charges:
        logger.info(f"Charges: {result.charges.total_charges}")
    for issue in result.data_issues:
        logger.warning(f"Issue: {issue}")
    logger.info("=" * 60)
    print(report.summary)

    if dev_storage:
        dev_storage.save_report(report)
    if args.save:
        writer = ReportWriter()
        if not await writer.test_connection():
            logger.error("Supabase connection failed, report not saved")
            return 1
        await writer.save_report(report)
    return 0


def main() -> None:
    """Main entry point."""
    setup_logging()
    args = parse_args()

    if args.dev:
        config.HEADLESS = False
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        Config.validate(require_llm=True, require_supabase=args.save)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    try:
        sys.exit(asyncio.run(_run(args)))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
