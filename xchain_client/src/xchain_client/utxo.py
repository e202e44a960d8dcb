"""
UTXO-chain client: balances, history, fees and transfers.

Chain packages subclass UTXOClient and only provide their asset, address
codecs, fallback fee rate and collaborator constructors. Fee estimation, coin
selection, signing and broadcast are the same for every UTXO chain.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime, timezone
from typing import ClassVar

from loguru import logger

from xchain_client.address import AddressCodec
from xchain_client.client import BaseClient, Initializer, validate_index
from xchain_client.coin_selection import build_plan
from xchain_client.config import UTXOClientParams
from xchain_client.errors import InvalidAmount
from xchain_client.explorer import UTXO, Broadcaster, Explorer, RawTx
from xchain_client.fees import fees_from_rates, sample_fee_rate, schedule_from
from xchain_client.models import (
    Asset,
    Balance,
    FeeRates,
    Fees,
    FeesWithRates,
    Network,
    Tx,
    TxFrom,
    TxHistoryParams,
    TxParams,
    TxsPage,
    TxTo,
    TxType,
)
from xchain_client.signing import SIGHASH_ALL, sign_plan
from xchain_client.tx_builder import ScriptType, TxPlan, memo_script
from xchain_client.wallet import HDWallet


class UTXOClient(BaseClient[UTXOClientParams, HDWallet]):
    asset: ClassVar[Asset]
    script_type: ClassVar[ScriptType]
    fallback_fee_rate: ClassVar[float]
    codecs: ClassVar[dict[Network, AddressCodec]]
    sighash_type: ClassVar[int] = SIGHASH_ALL

    def __init__(
        self,
        params: UTXOClientParams,
        explorer: Explorer | None = None,
        broadcaster: Broadcaster | None = None,
    ):
        """
        Args:
            params: Client parameters
            explorer: Explorer to use instead of the one built from params
            broadcaster: Broadcaster to use instead of the one built from params
        """
        super().__init__(params)
        self._explorer = explorer
        self._broadcaster = broadcaster
        # Collaborators built by _connect; injected ones stay with the caller
        self._owned: list[Explorer | Broadcaster] = []

    @abstractmethod
    def create_explorer(self) -> Explorer:
        """Explorer for params, called once during initialization"""

    @abstractmethod
    def create_broadcaster(self) -> Broadcaster:
        """Broadcaster for params, called once during initialization"""

    def initializers(self) -> list[Initializer]:
        return [*super().initializers(), self._connect]

    async def _connect(self) -> None:
        if self._explorer is None:
            self._explorer = self.create_explorer()
            self._owned.append(self._explorer)
        if self._broadcaster is None:
            self._broadcaster = self.create_broadcaster()
            self._owned.append(self._broadcaster)
        logger.debug(
            f"{self.asset} collaborators: explorer={type(self._explorer).__name__}, "
            f"broadcaster={type(self._broadcaster).__name__}"
        )

    @property
    def explorer(self) -> Explorer:
        if self._explorer is None:
            raise RuntimeError("Client is not initialized")
        return self._explorer

    @property
    def broadcaster(self) -> Broadcaster:
        if self._broadcaster is None:
            raise RuntimeError("Client is not initialized")
        return self._broadcaster

    @property
    def codec(self) -> AddressCodec:
        return self.codecs[self.params.network]

    async def close(self) -> None:
        """Close the collaborators this client created."""
        owned, self._owned = self._owned, []
        for collaborator in owned:
            await collaborator.close()

    # Addresses

    def validate_address(self, address: str) -> bool:
        return self.codec.validate(address)

    def normalize_address(self, address: str) -> str:
        """Canonical form of address; raises InvalidAddress."""
        return self.codec.normalize(address)

    # Queries

    async def get_balance(self, address: str) -> list[Balance]:
        amount = await self.explorer.get_balance(self.normalize_address(address))
        return [Balance(asset=self.asset, amount=amount)]

    def _to_tx(self, raw: RawTx) -> Tx:
        return Tx(
            asset=self.asset,
            from_=[TxFrom(from_address=i.address or "", amount=i.value) for i in raw.inputs],
            to=[TxTo(to=o.address, amount=o.value) for o in raw.outputs if not o.is_null_data],
            date=datetime.fromtimestamp(raw.time, tz=timezone.utc),
            type=TxType.TRANSFER,
            hash=raw.txid,
        )

    async def get_transactions(self, params: TxHistoryParams) -> TxsPage:
        """
        One page of the address history, newest first as the explorer orders it.

        Transactions are fetched one at a time; if any fetch fails the whole
        call fails.
        """
        address = self.normalize_address(params.address)
        total, raw_txs = await self.explorer.get_transaction_history(
            address, params.offset, params.limit
        )
        return TxsPage(total=total, txs=[self._to_tx(raw) for raw in raw_txs])

    async def get_transaction_data(self, txid: str) -> Tx:
        return self._to_tx(await self.explorer.get_transaction(txid))

    # Fees

    async def get_fee_rates(self) -> FeeRates:
        sample = await sample_fee_rate(self.explorer, self.fallback_fee_rate)
        return schedule_from(sample)

    async def get_fees_with_rates(self, memo: str | None = None) -> FeesWithRates:
        rates = await self.get_fee_rates()
        return FeesWithRates(rates=rates, fees=fees_from_rates(rates, self.script_type, memo))

    async def get_fees(self) -> Fees:
        return (await self.get_fees_with_rates()).fees

    async def get_fees_with_memo(self, memo: str) -> Fees:
        return (await self.get_fees_with_rates(memo)).fees

    # Transfers

    async def get_spendable_utxos(self, address: str, memo: str | None) -> list[UTXO]:
        """
        UTXOs eligible for a transfer from address.

        Transfers carrying a memo never spend pending outputs.
        """
        utxos = await self.explorer.get_unspent_outputs(address, include_pending=memo is None)
        if memo is not None:
            utxos = [u for u in utxos if u.confirmed]
        return utxos

    async def build_tx(self, params: TxParams, sender: str, fee_rate: float) -> TxPlan:
        memo = params.memo or None
        recipient_script = self.codec.to_script_pubkey(params.recipient)
        sender_script = self.codec.to_script_pubkey(sender)

        utxos = await self.get_spendable_utxos(sender, memo)
        return build_plan(
            utxos,
            recipient_script=recipient_script,
            amount=params.amount,
            fee_rate=fee_rate,
            sender_script=sender_script,
            script_type=self.script_type,
            dust_threshold=self.params.dust_threshold,
            memo=memo,
        )

    async def transfer(self, params: TxParams) -> str:
        """
        Build, sign and broadcast a transfer.

        Index, amount, recipient and memo are validated before any request
        is made. The wallet is captured once; if it is purged or replaced
        while the transfer is in flight, signing fails with ClientLocked.

        Returns:
            Transaction id
        """
        wallet = self._require_wallet()
        index = validate_index(params.wallet_index)

        if params.amount == 0 and not self.params.allow_zero_amount:
            raise InvalidAmount("Amount must be greater than zero")
        self.codec.to_script_pubkey(params.recipient)
        if params.memo:
            memo_script(params.memo)
        sender = wallet.get_address(index)

        if params.fee_rate is not None:
            fee_rate = params.fee_rate
        else:
            fee_rate = (await self.get_fee_rates()).fast

        plan = await self.build_tx(params, sender, fee_rate)

        signed = sign_plan(plan, wallet.get_signing_key(index), self.sighash_type)

        logger.info(
            f"Broadcasting {self.asset} transfer of {params.amount} to {params.recipient} "
            f"(fee {plan.fee}, {fee_rate}/vbyte)"
        )
        txid = await self.broadcaster.broadcast(signed.hex)
        if txid != signed.txid:
            logger.warning(f"Broadcaster returned txid {txid}, expected {signed.txid}")
        return txid
