#!/usr/bin/env python3
"""内容同步脚本。

拉取一个站点的生成内容并写入本地目录，可单次运行或按 24 小时周期持续运行。

使用方式：
    # 单次同步（首次同步会合并历史已发布内容）
    python scripts/run_sync.py --domain example.com --install-id abc --target-dir public

    # 只抓取新内容
    python scripts/run_sync.py --domain example.com --install-id abc --target-dir public --variant new

    # 持续运行调度器（Ctrl+C 退出）
    python scripts/run_sync.py --domain example.com --install-id abc --target-dir public --schedule

    # JSON 输出
    python scripts/run_sync.py ... --json
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

from seotrove_sync.core.infrastructure.logging import setup_logging  # noqa: E402
from seotrove_sync.modules.content.application.content_source import (  # noqa: E402
    ContentSource,
)
from seotrove_sync.modules.content.application.scheduler import (  # noqa: E402
    ContentScheduler,
)
from seotrove_sync.modules.content.domain.entities import (  # noqa: E402
    SourceConfig,
    SyncOutcome,
)

VARIANTS = ("sync", "new", "previous", "all")


async def run_once(source: ContentSource, variant: str) -> SyncOutcome:
    if variant == "new":
        return await source.sync_new()
    if variant == "previous":
        return await source.sync_previously_published()
    if variant == "all":
        return await source.sync_all()
    return await source.sync()


async def run_schedule(source: ContentSource, source_id: str) -> None:
    scheduler = ContentScheduler(source, source_id)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop_all()


def print_outcome(outcome: SyncOutcome, as_json: bool) -> None:
    if as_json:
        print(json.dumps(asdict(outcome), indent=2, ensure_ascii=False))
        return

    status = "✅" if outcome.success else "❌"
    print(f"{status} {outcome.message}")
    for path in outcome.files_created:
        print(f"   + {path}")
    for error in outcome.errors or []:
        print(f"   ! {error}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Sync SEOTrove generated content")
    parser.add_argument("--domain", required=True, help="站点域名")
    parser.add_argument("--install-id", required=True, help="安装标识")
    parser.add_argument("--target-dir", required=True, type=Path, help="写入目录")
    parser.add_argument(
        "--variant",
        choices=VARIANTS,
        default="sync",
        help="sync=首次合并/之后只抓新内容, new, previous, all",
    )
    parser.add_argument("--schedule", action="store_true", help="持续按周期同步")
    parser.add_argument("--id", default="default", help="调度模式下的源 ID")
    parser.add_argument("--json", action="store_true", help="JSON 输出")
    args = parser.parse_args()

    setup_logging()

    source = ContentSource(
        SourceConfig(
            domain=args.domain,
            install_id=args.install_id,
            target_directory=args.target_dir,
        )
    )

    if args.schedule:
        try:
            asyncio.run(run_schedule(source, args.id))
        except KeyboardInterrupt:
            print("\nScheduler stopped")
        return 0

    outcome = asyncio.run(run_once(source, args.variant))
    print_outcome(outcome, args.json)
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())
