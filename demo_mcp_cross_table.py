# demo_mcp_cross_table.py
# Version: v1
#
# Demo: build a country x year cross table for one indicator.
#
# Usage:
#
#   python demo_mcp_cross_table.py WHOSIS_000001 USA,FRA,DEU 2015:2019

import asyncio
import sys
from typing import Any, Dict, List, Tuple

from who_gho_mcp.tools import tasks


def pivot(rows: List[Dict[str, Any]]) -> Tuple[Dict[Any, Dict[Any, Any]], List[Any]]:
    """Pivot cross-table rows into {country: {year: value}} plus the sorted years."""
    table: Dict[Any, Dict[Any, Any]] = {}
    for row in rows:
        table.setdefault(row["spatial_dim"], {})[row["time_dim"]] = row["value"]

    # Years may be ints or text depending on the upstream format.
    years_seen = sorted({y for per_year in table.values() for y in per_year}, key=str)
    return table, years_seen


async def main() -> None:
    indicator = sys.argv[1] if len(sys.argv) > 1 else "WHOSIS_000001"
    countries = sys.argv[2] if len(sys.argv) > 2 else "USA,FRA"
    years = sys.argv[3] if len(sys.argv) > 3 else "2015:2019"

    result: Dict[str, Any] = await tasks.who_health(
        "get_cross_table",
        indicator_code=indicator,
        countries=countries,
        years=years,
        sex="BTSX",
    )

    if "error" in result:
        print("Error:", result["error"]["message"])
        return

    print("API URL:", result["api_url"])
    print("Summary:", result["summary"])

    table, years_seen = pivot(result["structured_data"])
    print("country  " + "  ".join(str(y) for y in years_seen))
    for country, per_year in sorted(table.items(), key=lambda item: str(item[0])):
        cells = [str(per_year.get(y, "-")) for y in years_seen]
        print(f"{country:<8} " + "  ".join(cells))


if __name__ == "__main__":
    asyncio.run(main())
