"""
Command line tools shared by the chain packages.

Each chain exposes build_app(...) as its own typer app (xchain-btc,
xchain-ltc, xchain-bch). Settings come from XCHAIN_* environment variables
or a .env file; --network and --log-level override them.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable, Coroutine
from typing import Any

import typer
from loguru import logger

from xchain_client.config import UTXOClientParams, XChainSettings, get_settings
from xchain_client.errors import XChainError
from xchain_client.models import FeeOption, Network, TxHistoryParams, TxParams
from xchain_client.utxo import UTXOClient
from xchain_client.wallet import HDWallet


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def format_amount(amount: int, decimals: int, symbol: str) -> str:
    return f"{amount:,} ({amount / 10**decimals:.{decimals}f} {symbol})"


def build_app(
    name: str,
    help_text: str,
    client_cls: type[UTXOClient],
    wallet_cls: type[HDWallet],
    params_for: Callable[[Network], UTXOClientParams],
) -> typer.Typer:
    """Typer app with address, balance, fees, history, tx and send commands."""
    app = typer.Typer(name=name, help=help_text, add_completion=False)
    symbol = client_cls.asset.symbol
    decimals = client_cls.asset.decimals

    def load(network: str | None, log_level: str | None) -> tuple[XChainSettings, UTXOClientParams]:
        settings = get_settings()
        setup_logging(log_level or settings.log_level)
        params = params_for(Network(network or settings.network))
        return settings, settings.apply(params)

    def require_phrase(settings: XChainSettings) -> str:
        if not settings.phrase:
            logger.error("Mnemonic required. Set XCHAIN_PHRASE in the environment or .env file")
            raise typer.Exit(1)
        return settings.phrase

    def run(coro_fn: Callable[[], Coroutine[Any, Any, None]]) -> None:
        try:
            asyncio.run(coro_fn())
        except XChainError as e:
            logger.error(f"{type(e).__name__}: {e}")
            raise typer.Exit(1) from e

    @app.command()
    def address(
        index: int = typer.Option(0, "--index", "-i", help="Wallet index"),
        network: str | None = typer.Option(None, "--network", "-n", help="mainnet or testnet"),
        log_level: str | None = typer.Option(None, "--log-level", "-l"),
    ) -> None:
        """Show the wallet address at an index."""
        settings, params = load(network, log_level)
        phrase = require_phrase(settings)

        async def _address() -> None:
            client = await client_cls.create(params, wallet_cls.create(phrase))
            async with client:
                addr = await client.get_address(index)
                print(f"Address:    {addr}")
                print(f"Path:       {client.get_full_derivation_path(index)}")
                print(f"Explorer:   {client.get_explorer_address_url(addr)}")

        run(_address)

    @app.command()
    def balance(
        addr: str = typer.Argument(..., metavar="ADDRESS"),
        network: str | None = typer.Option(None, "--network", "-n"),
        log_level: str | None = typer.Option(None, "--log-level", "-l"),
    ) -> None:
        """Show the balance of an address."""
        _, params = load(network, log_level)

        async def _balance() -> None:
            async with await client_cls.create(params) as client:
                for bal in await client.get_balance(addr):
                    print(f"{bal.asset}: {format_amount(bal.amount, decimals, symbol)}")

        run(_balance)

    @app.command()
    def fees(
        memo: str | None = typer.Option(None, "--memo", "-m", help="Include a memo output"),
        network: str | None = typer.Option(None, "--network", "-n"),
        log_level: str | None = typer.Option(None, "--log-level", "-l"),
    ) -> None:
        """Show fee rates and reference fees per tier."""
        _, params = load(network, log_level)

        async def _fees() -> None:
            async with await client_cls.create(params) as client:
                result = await client.get_fees_with_rates(memo)
                for option in FeeOption:
                    print(
                        f"{option.value:<8} {result.rates[option]:>12.3f}/byte  "
                        f"{result.fees[option]:>10,} fee"
                    )

        run(_fees)

    @app.command()
    def history(
        addr: str = typer.Argument(..., metavar="ADDRESS"),
        offset: int = typer.Option(0, "--offset"),
        limit: int = typer.Option(10, "--limit"),
        network: str | None = typer.Option(None, "--network", "-n"),
        log_level: str | None = typer.Option(None, "--log-level", "-l"),
    ) -> None:
        """List transactions of an address."""
        _, params = load(network, log_level)

        async def _history() -> None:
            async with await client_cls.create(params) as client:
                page = await client.get_transactions(
                    TxHistoryParams(address=addr, offset=offset, limit=limit)
                )
                print(f"Total transactions: {page.total}")
                for tx in page.txs:
                    print(f"  {tx.date:%Y-%m-%d %H:%M:%S}  {tx.hash}")

        run(_history)

    @app.command()
    def tx(
        txid: str = typer.Argument(...),
        network: str | None = typer.Option(None, "--network", "-n"),
        log_level: str | None = typer.Option(None, "--log-level", "-l"),
    ) -> None:
        """Show a transaction."""
        _, params = load(network, log_level)

        async def _tx() -> None:
            async with await client_cls.create(params) as client:
                data = await client.get_transaction_data(txid)
                print(f"Hash:  {data.hash}")
                print(f"Date:  {data.date:%Y-%m-%d %H:%M:%S}")
                for item in data.from_:
                    print(f"  in   {item.from_address}  {item.amount:,}")
                for item in data.to:
                    print(f"  out  {item.to}  {item.amount:,}")
                print(f"URL:   {client.get_explorer_tx_url(data.hash)}")

        run(_tx)

    @app.command()
    def send(
        recipient: str = typer.Argument(...),
        amount: int = typer.Argument(..., help="Amount in base units"),
        memo: str | None = typer.Option(None, "--memo", "-m"),
        fee_rate: float | None = typer.Option(None, "--fee-rate", help="Base units per vbyte"),
        index: int = typer.Option(0, "--index", "-i", help="Wallet index to spend from"),
        network: str | None = typer.Option(None, "--network", "-n"),
        log_level: str | None = typer.Option(None, "--log-level", "-l"),
    ) -> None:
        """Send a transfer and print its transaction id."""
        settings, params = load(network, log_level)
        phrase = require_phrase(settings)

        async def _send() -> None:
            client = await client_cls.create(params, wallet_cls.create(phrase))
            async with client:
                txid = await client.transfer(
                    TxParams(
                        recipient=recipient,
                        amount=amount,
                        memo=memo,
                        wallet_index=index,
                        fee_rate=fee_rate,
                    )
                )
                print(f"Transaction: {txid}")
                print(f"Explorer:    {client.get_explorer_tx_url(txid)}")

        run(_send)

    return app
