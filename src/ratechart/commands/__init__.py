"""CLI command implementations for the rate chart system.

Each command module provides:
- Configuration or input parsing and validation
- Integration with core library functions
"""

from ratechart.commands.compare import (build_compare_config,
                                        load_compare_config, merge_overrides,
                                        parse_date)
from ratechart.commands.track import parse_purchase

__all__ = [
    "build_compare_config",
    "load_compare_config",
    "merge_overrides",
    "parse_date",
    "parse_purchase",
]
