"""Pytest fixtures shared across the mcpsol test suite."""

import pytest

from mcpsol.schema import ArgType, Schema, SchemaBuilder, ToolBuilder


def build_counter_schema() -> Schema:
    """The 4-tool counter catalog."""
    return (
        SchemaBuilder("counter")
        .add_tool(ToolBuilder("list_tools"))
        .add_tool(
            ToolBuilder("initialize")
            .description("Create counter")
            .signer_writable("counter")
            .signer("authority")
        )
        .add_tool(
            ToolBuilder("increment")
            .description("Add to counter")
            .writable("counter")
            .signer("authority")
            .arg("amount", ArgType.U64)
        )
        .add_tool(
            ToolBuilder("decrement")
            .description("Subtract from counter")
            .writable("counter")
            .signer("authority")
            .arg("amount", ArgType.U64)
        )
        .build()
    )


def build_defi_schema() -> Schema:
    """A 10-tool AMM catalog with descriptions on every parameter."""
    return (
        SchemaBuilder("defi_protocol")
        .add_tool(
            ToolBuilder("list_tools").description(
                "List available MCP tools. Pass cursor byte to paginate."
            )
        )
        .add_tool(
            ToolBuilder("initialize_pool")
            .description("Create a new liquidity pool")
            .signer_writable("pool", "Pool account to create")
            .signer("authority", "Pool authority")
            .account("token_a_mint", description="Token A mint")
            .account("token_b_mint", description="Token B mint")
            .arg("fee_rate", ArgType.U16, "Fee rate in basis points")
        )
        .add_tool(
            ToolBuilder("add_liquidity")
            .description("Add liquidity to a pool")
            .writable("pool", "Pool to add liquidity to")
            .signer("provider", "Liquidity provider")
            .writable("provider_token_a", "Provider's token A account")
            .writable("provider_token_b", "Provider's token B account")
            .arg("amount_a", ArgType.U64, "Amount of token A")
            .arg("amount_b", ArgType.U64, "Amount of token B")
        )
        .add_tool(
            ToolBuilder("remove_liquidity")
            .description("Remove liquidity from a pool")
            .writable("pool", "Pool to remove from")
            .signer("provider", "Liquidity provider")
            .writable("lp_tokens", "LP token account to burn")
            .arg("lp_amount", ArgType.U64, "Amount of LP tokens to burn")
        )
        .add_tool(
            ToolBuilder("swap")
            .description("Swap tokens through the AMM")
            .writable("pool", "Pool to swap through")
            .signer("user", "User performing swap")
            .writable("user_token_in", "User's input token account")
            .writable("user_token_out", "User's output token account")
            .arg("amount_in", ArgType.U64, "Amount to swap")
            .arg("min_out", ArgType.U64, "Minimum output (slippage)")
        )
        .add_tool(
            ToolBuilder("stake")
            .description("Stake LP tokens for rewards")
            .writable("stake_account", "User's stake account")
            .signer("user", "Staking user")
            .writable("lp_tokens", "LP tokens to stake")
            .arg("amount", ArgType.U64, "Amount to stake")
        )
        .add_tool(
            ToolBuilder("unstake")
            .description("Unstake LP tokens")
            .writable("stake_account", "User's stake account")
            .signer("user", "Unstaking user")
            .arg("amount", ArgType.U64, "Amount to unstake")
        )
        .add_tool(
            ToolBuilder("claim_rewards")
            .description("Claim staking rewards")
            .writable("stake_account", "User's stake account")
            .signer("user", "Claiming user")
            .writable("reward_account", "Account to receive rewards")
        )
        .add_tool(
            ToolBuilder("get_pool_info")
            .description("Get pool state via return_data")
            .account("pool", description="Pool to query")
        )
        .add_tool(
            ToolBuilder("get_stake_info")
            .description("Get stake state via return_data")
            .account("stake_account", description="Stake account to query")
        )
        .build()
    )


def build_ten_tool_schema() -> Schema:
    """A 10-tool vault catalog small enough for compact delivery."""
    return (
        SchemaBuilder("vault")
        .add_tool(ToolBuilder("list_tools").description("List tools"))
        .add_tool(ToolBuilder("init").description("Create vault").signer_writable("vault"))
        .add_tool(
            ToolBuilder("deposit").description("Add funds").writable("vault").arg("amount", ArgType.U64)
        )
        .add_tool(
            ToolBuilder("withdraw").description("Take funds").writable("vault").arg("amount", ArgType.U64)
        )
        .add_tool(ToolBuilder("pause").description("Pause"))
        .add_tool(ToolBuilder("resume").description("Resume"))
        .add_tool(ToolBuilder("close").description("Close vault").writable("vault"))
        .add_tool(ToolBuilder("get_info").description("Read state").account("vault"))
        .add_tool(ToolBuilder("set_fee").description("Set fee").arg("fee", ArgType.U16))
        .add_tool(ToolBuilder("ping").description("Health check"))
        .build()
    )


@pytest.fixture
def counter_address() -> str:
    return "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


@pytest.fixture
def authority_address() -> str:
    return "So11111111111111111111111111111111111111112"


@pytest.fixture
def system_program() -> str:
    """The all-zero address."""
    return "11111111111111111111111111111111"


@pytest.fixture
def program_id() -> str:
    return "7QniyJzHpS7uFdYogBE5oUPxj6TXyNKFgkR4Dztbnbct"


@pytest.fixture
def counter_schema() -> Schema:
    return build_counter_schema()


@pytest.fixture
def defi_schema() -> Schema:
    return build_defi_schema()


@pytest.fixture
def ten_tool_schema() -> Schema:
    return build_ten_tool_schema()


@pytest.fixture
def single_tool_schema() -> Schema:
    return (
        SchemaBuilder("single")
        .add_tool(
            ToolBuilder("transfer")
            .description("Transfer tokens between accounts")
            .signer_writable("from", "Source account, pays the fee")
            .writable("to", "Destination account")
            .arg("amount", ArgType.U64, "Amount in base units")
        )
        .build()
    )


@pytest.fixture
def empty_schema() -> Schema:
    return SchemaBuilder("empty").build()
