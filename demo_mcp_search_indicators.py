# demo_mcp_search_indicators.py
# Version: v1
#
# Demo: call the MCP-style search_indicators task directly and print results.
#
# Usage:
#
#   WHO_GHO_MOCK_MODE=1 python demo_mcp_search_indicators.py "life expectancy"

import asyncio
import sys
from typing import Any, Dict, List

from who_gho_mcp.tools import tasks


async def main() -> None:
    keywords = sys.argv[1] if len(sys.argv) > 1 else "life expectancy"
    print(f"Calling MCP task: search_indicators({keywords!r})")
    result: Dict[str, Any] = await tasks.who_health("search_indicators", keywords=keywords)

    if "error" in result:
        print("Error:", result["error"]["message"])
        return

    indicators: List[Dict[str, Any]] = result.get("indicators", [])
    print(f"Indicators returned: {result['total_count']}  ({result['api_url']})")

    for ind in indicators[:20]:
        print(f"- {ind['code']}: {ind['name']}")


if __name__ == "__main__":
    asyncio.run(main())
