"""
CLI helper to resolve a property address and print its local health indicators.
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to Python path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from src.localhealth.pipelines.comparison import indicator_positions
from src.localhealth.services.health_indicators import HealthIndicatorService
from src.localhealth.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch public health indicators for the area around a property.")
    parser.add_argument("address", nargs="?", help="Property address, e.g. \"8 Birch Road, Manchester, M1 3LP\".")
    parser.add_argument("--area-code", help="Skip address resolution and use this area code.")
    parser.add_argument("--json", action="store_true", help="Print indicators as JSON instead of a table.")
    args = parser.parse_args()
    if not args.address and not args.area_code:
        parser.error("an address or --area-code is required")
    return args


def print_table(area, indicators) -> None:
    print(f"\n{area.name} ({area.code})")
    print("=" * 100)
    for indicator in indicators:
        positions = indicator_positions(indicator)
        age = f" [{indicator.age_group}]" if indicator.age_group else ""
        print(f"{indicator.name}{age}  ({indicator.period})")
        print(
            f"  Local: {indicator.local_value:<18} England: {indicator.national_value:<18} "
            f"{indicator.significance}"
        )
        print(
            f"  Worst: {indicator.worst_value:<18} Best: {indicator.best_value:<18} "
            f"Gauge: {positions['local']:.0f} (England {positions['national']:.0f})"
        )
    print(f"\n{len(indicators)} indicators")


async def run(args: argparse.Namespace) -> int:
    service = HealthIndicatorService(debounce_seconds=0)
    try:
        if args.area_code:
            area = await service.find_area_by_code(args.area_code)
        else:
            area = await service.resolve_area(args.address)

        if area is None:
            logger.warning("area_not_resolved", address=args.address, area_code=args.area_code)
            print("No matching area found.")
            return 1

        indicators = await service.fetch_indicators_for_area(area)
    finally:
        await service.aclose()

    if args.json:
        print(json.dumps([i.model_dump(by_alias=True) for i in indicators], indent=2))
    else:
        print_table(area, indicators)
    return 0


def main():
    setup_logging()
    args = parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
