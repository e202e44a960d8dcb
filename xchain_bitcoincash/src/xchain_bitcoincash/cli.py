"""
xchain-bch - Bitcoin Cash wallet client command line.
"""

from __future__ import annotations

from xchain_bitcoincash.client import BitcoinCashClient
from xchain_bitcoincash.params import params_for
from xchain_bitcoincash.wallet import BitcoinCashWallet
from xchain_client.cli import build_app

app = build_app(
    name="xchain-bch",
    help_text="Bitcoin Cash wallet client",
    client_cls=BitcoinCashClient,
    wallet_cls=BitcoinCashWallet,
    params_for=params_for,
)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
