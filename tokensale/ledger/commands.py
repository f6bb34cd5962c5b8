"""Typed commands accepted by the runner.

Each model describes one operation: its wire name (`operation`), the
blueprint method it is routed to and the arguments it carries. Commands are
validated once by `parse_command`; blueprint methods only ever see typed
values.
"""

from typing import Annotated, Any, ClassVar, Literal, Mapping, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError

from tokensale.crypto.util import parse_address
from tokensale.ledger.context import Context
from tokensale.ledger.exception import InvalidAddress, InvalidCommand
from tokensale.ledger.types import Address, AllocationClass


def _to_address(value: Any) -> Address:
    if not isinstance(value, (str, bytes)):
        raise ValueError("address must be bytes, hex or base58")
    try:
        return parse_address(value)
    except InvalidAddress as e:
        raise ValueError(str(e)) from e


AddressField = Annotated[bytes, BeforeValidator(_to_address)]


class BaseCommand(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    operation: str

    blueprint: ClassVar[str]
    method: ClassVar[str]
    is_view: ClassVar[bool] = False
    allowed_before_init: ClassVar[bool] = False

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return ()


# Administration

class InitSmartContract(BaseCommand):
    operation: Literal["InitSmartContract"] = "InitSmartContract"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "initialize"
    allowed_before_init: ClassVar[bool] = True


class AllocatePrivateSalePurchase(BaseCommand):
    operation: Literal["AllocatePrivateSalePurchase"] = "AllocatePrivateSalePurchase"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "allocate_private_sale"

    address: AddressField
    allocation_type: AllocationClass
    amount: int = Field(gt=0)

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address, self.allocation_type, self.amount)


class LockPrivateSaleAllocation(BaseCommand):
    operation: Literal["LockPrivateSaleAllocation"] = "LockPrivateSaleAllocation"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "lock_private_sale_allocation"


class ClaimUnsoldTokens(BaseCommand):
    operation: Literal["ClaimUnsoldTokens"] = "ClaimUnsoldTokens"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "claim_unsold_tokens"


class UpdateAdminAddress(BaseCommand):
    operation: Literal["UpdateAdminAddress"] = "UpdateAdminAddress"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "update_admin"

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address,)


class EnableTransferFromWhitelisting(BaseCommand):
    operation: Literal["EnableTransferFromWhitelisting"] = "EnableTransferFromWhitelisting"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "enable_transfer_from_whitelisting"

    enabled: bool

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.enabled,)


class WhitelistTransferFromAdd(BaseCommand):
    operation: Literal["WhitelistTransferFromAdd"] = "WhitelistTransferFromAdd"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "whitelist_transfer_from_add"

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address,)


class WhitelistTransferFromRemove(BaseCommand):
    operation: Literal["WhitelistTransferFromRemove"] = "WhitelistTransferFromRemove"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "whitelist_transfer_from_remove"

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address,)


# KYC

class AddAddress(BaseCommand):
    operation: Literal["AddAddress"] = "AddAddress"
    blueprint: ClassVar[str] = "whitelist"
    method: ClassVar[str] = "add_address"
    allowed_before_init: ClassVar[bool] = True

    address: AddressField
    group_number: int

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address, self.group_number)


class RevokeAddress(BaseCommand):
    operation: Literal["RevokeAddress"] = "RevokeAddress"
    blueprint: ClassVar[str] = "whitelist"
    method: ClassVar[str] = "revoke_address"
    allowed_before_init: ClassVar[bool] = True

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address,)


class GetGroupNumber(BaseCommand):
    operation: Literal["GetGroupNumber"] = "GetGroupNumber"
    blueprint: ClassVar[str] = "whitelist"
    method: ClassVar[str] = "tier_of"
    is_view: ClassVar[bool] = True
    allowed_before_init: ClassVar[bool] = True

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address,)


class CrowdsaleStatus(BaseCommand):
    operation: Literal["crowdsale_status"] = "crowdsale_status"
    blueprint: ClassVar[str] = "whitelist"
    method: ClassVar[str] = "is_whitelisted"
    is_view: ClassVar[bool] = True
    allowed_before_init: ClassVar[bool] = True

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address,)


class GetGroupMaxContribution(BaseCommand):
    operation: Literal["GetGroupMaxContribution"] = "GetGroupMaxContribution"
    blueprint: ClassVar[str] = "participation"
    method: ClassVar[str] = "max_contribution"
    is_view: ClassVar[bool] = True

    group_number: int

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.group_number, ctx.timestamp)


class GetGroupUnlockTime(BaseCommand):
    operation: Literal["GetGroupUnlockTime"] = "GetGroupUnlockTime"
    blueprint: ClassVar[str] = "participation"
    method: ClassVar[str] = "tier_unlock_time"
    is_view: ClassVar[bool] = True

    group_number: int

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.group_number,)


class GroupParticipationIsUnlocked(BaseCommand):
    operation: Literal["GroupParticipationIsUnlocked"] = "GroupParticipationIsUnlocked"
    blueprint: ClassVar[str] = "participation"
    method: ClassVar[str] = "is_unlocked"
    is_view: ClassVar[bool] = True

    group_number: int

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.group_number, ctx.timestamp)


# Sale

class MintTokens(BaseCommand):
    """Native contribution; payer and amounts come from the context."""

    operation: Literal["MintTokens"] = "MintTokens"
    blueprint: ClassVar[str] = "crowdsale"
    method: ClassVar[str] = "mint_tokens"


class MintTokensEth(BaseCommand):
    operation: Literal["MintTokensEth"] = "MintTokensEth"
    blueprint: ClassVar[str] = "crowdsale"
    method: ClassVar[str] = "mint_tokens_eth"

    eth_address: str = Field(min_length=1)
    neo_address: AddressField
    eth_received: int = Field(ge=0)

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.eth_address, self.neo_address, self.eth_received)


class BalanceOf(BaseCommand):
    operation: Literal["balanceOf"] = "balanceOf"
    blueprint: ClassVar[str] = "crowdsale"
    method: ClassVar[str] = "balance_of"
    is_view: ClassVar[bool] = True

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address,)


class TotalSupply(BaseCommand):
    operation: Literal["totalSupply"] = "totalSupply"
    blueprint: ClassVar[str] = "crowdsale"
    method: ClassVar[str] = "total_supply"
    is_view: ClassVar[bool] = True


class CrowdsaleAvailableAmount(BaseCommand):
    operation: Literal["crowdsale_available"] = "crowdsale_available"
    blueprint: ClassVar[str] = "crowdsale"
    method: ClassVar[str] = "crowdsale_available_amount"
    is_view: ClassVar[bool] = True


class TokensLocked(BaseCommand):
    operation: Literal["tokens_locked"] = "tokens_locked"
    blueprint: ClassVar[str] = "vesting"
    method: ClassVar[str] = "currently_locked"
    is_view: ClassVar[bool] = True

    address: AddressField

    def args(self, ctx: Context) -> tuple[Any, ...]:
        return (self.address, ctx.timestamp)


class IsPrivateSaleAllocationLocked(BaseCommand):
    operation: Literal["IsPrivateSaleAllocationLocked"] = "IsPrivateSaleAllocationLocked"
    blueprint: ClassVar[str] = "administration"
    method: ClassVar[str] = "private_sale_locked_at"
    is_view: ClassVar[bool] = True


Command = Annotated[
    Union[
        InitSmartContract,
        AllocatePrivateSalePurchase,
        LockPrivateSaleAllocation,
        ClaimUnsoldTokens,
        UpdateAdminAddress,
        EnableTransferFromWhitelisting,
        WhitelistTransferFromAdd,
        WhitelistTransferFromRemove,
        AddAddress,
        RevokeAddress,
        GetGroupNumber,
        CrowdsaleStatus,
        GetGroupMaxContribution,
        GetGroupUnlockTime,
        GroupParticipationIsUnlocked,
        MintTokens,
        MintTokensEth,
        BalanceOf,
        TotalSupply,
        CrowdsaleAvailableAmount,
        TokensLocked,
        IsPrivateSaleAllocationLocked,
    ],
    Field(discriminator="operation"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(data: Mapping[str, Any]) -> BaseCommand:
    """Validate a raw `{"operation": ..., **args}` mapping.

    :raises InvalidCommand: on an unknown operation or bad arguments
    """
    try:
        return _command_adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidCommand(f"Invalid command: {e.errors(include_url=False)}") from e
