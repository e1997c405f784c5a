#!/usr/bin/env python3
"""服务器列表查看脚本。

从远程目录抓取服务器列表，并以菜单按钮的形式打印出来。

使用方式：
    # 人数多的在前
    python scripts/list_servers.py

    # 人数少的在前
    python scripts/list_servers.py --ordering asc

    # 指定目录地址并输出 JSON
    python scripts/list_servers.py --url http://localhost:3000 --json
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

ORDERINGS = {"desc": "BY_POPULATION_DESC", "asc": "BY_POPULATION_ASC"}


async def run(url: str | None, ordering_key: str, as_json: bool) -> int:
    from server_list.modules.catalog.domain.entities import Ordering
    from server_list.modules.catalog.domain.exceptions import FetchError
    from server_list.modules.catalog.infrastructure.http_client import (
        HttpCatalogClient,
    )
    from server_list.modules.menu.application.materializer import materialize

    ordering = Ordering[ORDERINGS[ordering_key]]
    client = HttpCatalogClient(url)
    try:
        entries = await client.fetch(ordering)
    except FetchError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1

    descriptors = materialize(entries)
    if as_json:
        print(
            json.dumps(
                [asdict(descriptor) for descriptor in descriptors],
                ensure_ascii=False,
                indent=2,
            )
        )
        return 0

    print(f"{len(descriptors)} server(s) from {client.base_url} ({ordering.value})")
    for descriptor in descriptors:
        print(f"\n[{descriptor.icon} x{descriptor.count}] {descriptor.title}")
        for line in descriptor.lore:
            print(f"    {line}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the remote server list")
    parser.add_argument("--url", help="Catalog base URL (default: CATALOG_URL)")
    parser.add_argument(
        "--ordering",
        choices=sorted(ORDERINGS),
        default="desc",
        help="desc = most players first, asc = fewest players first",
    )
    parser.add_argument("--json", action="store_true", help="Output JSON")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.url, args.ordering, args.json)))


if __name__ == "__main__":
    main()
