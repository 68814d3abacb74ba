"""
Create a demo platform with one project and a funded depositor.

    python scripts/bootstrap_demo.py <authority-hex> <depositor-hex> [amount]
"""

import sys
sys.path.insert(0, ".")

import asyncio
import os

from staking_ledger.config import get_settings
from staking_ledger.database import init_db, unit_of_work
from staking_ledger.engines.governance import PlatformGovernance, ProjectGovernance
from staking_ledger.kernel.assets import LedgerAssetMover
from staking_ledger.logging_config import configure_logging


async def main(authority: str, depositor: str, amount: int) -> None:
    settings = get_settings()
    configure_logging(log_level="INFO", environment=settings.environment)
    await init_db()

    asset_id = os.urandom(32).hex()
    async with unit_of_work() as db:
        mover = LedgerAssetMover(db, settings.asset_mover_id, program_id=settings.program_id_bytes)
        await PlatformGovernance(db, settings).initialize(authority)
        project = await ProjectGovernance(db, mover, settings).register_project(
            authority, "Demo", [7, 14, 30], asset_id
        )
        await mover.open_account(owner=authority, asset_id=asset_id)
        account = await mover.open_account(owner=depositor, asset_id=asset_id)
        await mover.mint_to(account.address, amount)

    print(f"project_id: {project.project_id}")
    print(f"asset_id:   {asset_id}")
    print(f"vault:      {project.custody_ref}")
    print(f"depositor account: {account.address} ({amount})")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(sys.argv[1], sys.argv[2], int(sys.argv[3]) if len(sys.argv) > 3 else 1_000_000))
