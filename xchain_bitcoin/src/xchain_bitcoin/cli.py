"""
xchain-btc - Bitcoin wallet client command line.
"""

from __future__ import annotations

from xchain_bitcoin.client import BitcoinClient
from xchain_bitcoin.params import params_for
from xchain_bitcoin.wallet import BitcoinWallet
from xchain_client.cli import build_app

app = build_app(
    name="xchain-btc",
    help_text="Bitcoin wallet client",
    client_cls=BitcoinClient,
    wallet_cls=BitcoinWallet,
    params_for=params_for,
)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
