"""Mint the house owner's API token.

The owner identity comes from ``OWNER_ID``. The token is signed with
``SECRET_KEY``, which must match the key the server runs with, so this
refuses to run when no key is configured.

    SECRET_KEY=... OWNER_ID=... blackjack-owner-token
"""

import argparse
import os
import sys

from api.session import get_token_signer
from config import config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="blackjack-owner-token",
        description="Print a signed X-Player-Token for the configured house owner.",
    )
    parser.parse_args(argv)

    if not os.getenv("SECRET_KEY"):
        parser.error("SECRET_KEY is not set; a token signed with a random key is useless")

    print(get_token_signer().sign(config.house.owner_id))
    return 0


if __name__ == "__main__":
    sys.exit(main())
