"""
xchain-ltc - Litecoin wallet client command line.
"""

from __future__ import annotations

from xchain_client.cli import build_app
from xchain_litecoin.client import LitecoinClient
from xchain_litecoin.params import params_for
from xchain_litecoin.wallet import LitecoinWallet

app = build_app(
    name="xchain-ltc",
    help_text="Litecoin wallet client",
    client_cls=LitecoinClient,
    wallet_cls=LitecoinWallet,
    params_for=params_for,
)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
