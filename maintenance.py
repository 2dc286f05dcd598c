#!/usr/bin/env python3
"""Manual maintenance script for PVR recorded content"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from pvr.core.config import get_config
from pvr.core.maintenance import run_maintenance
from pvr.core.services import create_services
import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Run history cleanup and both file reconciliation sweeps once"""
    try:
        config = get_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot load configuration: {e}")
        sys.exit(1)

    logger.info(f"Running maintenance on database: {config.database_path}")

    services = create_services(config)
    results = run_maintenance(services.recorded_manager, services.file_cleaner)

    print("\n=== Maintenance Summary ===")
    print(f"History entries deleted: {results['history_deleted']}")
    for key in ('video_file_cleanup', 'drop_log_file_cleanup'):
        result = results[key]
        if result is None:
            print(f"{key}: failed (see log)")
            continue
        counts = ', '.join(f"{k}={v}" for k, v in sorted(result['counts'].items())) or 'no changes'
        print(f"{key}: {counts}; {len(result['failures'])} failures")
    print("\nMaintenance completed")


if __name__ == "__main__":
    main()
