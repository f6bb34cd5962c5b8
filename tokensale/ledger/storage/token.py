from tokensale.ledger.storage.storage import LedgerStorage, StorageKeys
from tokensale.ledger.types import Address, Amount


class TokenLedger:
    """Balance and total-supply bookkeeping over a ledger storage."""

    def __init__(self, storage: LedgerStorage) -> None:
        self.storage = storage

    def balance_of(self, address: Address) -> Amount:
        return Amount(self.storage.get(StorageKeys.balance(address), 0))

    def set_balance(self, address: Address, amount: int) -> None:
        assert amount >= 0, "negative balance"
        if amount == 0:
            self.storage.delete(StorageKeys.balance(address))
        else:
            self.storage.put(StorageKeys.balance(address), Amount(amount))

    def credit(self, address: Address, amount: int) -> Amount:
        new_balance = Amount(self.balance_of(address) + amount)
        self.set_balance(address, new_balance)
        return new_balance

    def total_supply(self) -> Amount:
        return Amount(self.storage.get(StorageKeys.TOTAL_SUPPLY, 0))

    def set_total_supply(self, amount: int) -> None:
        assert amount >= 0, "negative total supply"
        self.storage.put(StorageKeys.TOTAL_SUPPLY, Amount(amount))

    def increase_total_supply(self, amount: int) -> Amount:
        total = Amount(self.total_supply() + amount)
        self.set_total_supply(total)
        return total

    def sum_of_balances(self) -> Amount:
        return Amount(sum(value for _, value in self.storage.iter_prefix(StorageKeys.BALANCE_PREFIX)))
