"""
magink/examples/badge_demo.py

Walks two accounts through starting eras and claiming badges on a
deterministic block host, then prints the collected metrics.

Usage:
    python examples/badge_demo.py
"""

import logging

from magink import Magink, BlockEnvironment, MaginkConfig, create_store, default_accounts

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [MAGINK] %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    config = MaginkConfig.from_env()
    env = BlockEnvironment()
    store = create_store(config, current_tick=env.block_number)
    magink = Magink(env, store=store)
    accounts = default_accounts()

    magink.start(config.default_era)
    env.set_caller(accounts.bob)
    magink.start(config.default_era // 2)

    for _ in range(config.default_era * 2):
        env.advance_block()
        for account in (accounts.alice, accounts.bob):
            env.set_caller(account)
            result = magink.claim()
            if result:
                logger.info(
                    f"{account} claimed at block {env.block_number()}, "
                    f"badges: {magink.get_badges()}"
                )

    for account in (accounts.alice, accounts.bob):
        logger.info(
            f"{account}: badges={magink.get_badges_for(account)} "
            f"remaining={magink.get_remaining_for(account)}"
        )

    if store.metrics:
        print(store.metrics.collect(profile_count=len(store)))


if __name__ == "__main__":
    main()
