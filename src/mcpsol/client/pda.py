"""PDA seed hints embedded in tool descriptions.

Programs can document how an account address is derived by appending a
seed list to the description, e.g.

    "Create vault PDA. seeds=[\"vault\",owner,mint]"

Quoted items are literal seeds; bare items reference another parameter.
derive_pda turns a parsed seed list into the program-derived address once
the referenced addresses are known.
"""

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from solders.pubkey import Pubkey

from ..errors import InvalidArgError, MissingParamError
from .call import decode_pubkey

_SEEDS_PATTERN = re.compile(r"seeds=\[(.*?)\]")

MAX_SEED_LEN = 32
# One slot of the runtime's 16 is taken by the bump seed
MAX_SEEDS = 15


@dataclass(frozen=True)
class PdaSeed:
    kind: str  # "literal" or "ref"
    value: str


@dataclass
class PdaSeeds:
    literals: list[str] = field(default_factory=list)
    refs: list[str] = field(default_factory=list)
    seeds: list[PdaSeed] = field(default_factory=list)


def parse_pda_seeds(description: Optional[str]) -> Optional[PdaSeeds]:
    """
    Extract the seed list from a description.

    Returns:
        PdaSeeds in declared order, or None if the description has no seeds=[...]
    """
    if not description:
        return None
    match = _SEEDS_PATTERN.search(description)
    if match is None:
        return None

    result = PdaSeeds()
    for part in match.group(1).split(","):
        item = part.strip()
        if not item:
            continue
        if len(item) >= 2 and item[0] == item[-1] and item[0] in "\"'":
            literal = item[1:-1]
            result.seeds.append(PdaSeed("literal", literal))
            result.literals.append(literal)
        else:
            result.seeds.append(PdaSeed("ref", item))
            result.refs.append(item)
    return result


def _seed_bytes(seed: PdaSeed, values: Mapping[str, str]) -> bytes:
    if seed.kind == "literal":
        raw = seed.value.encode("utf-8")
        if len(raw) > MAX_SEED_LEN:
            raise InvalidArgError(seed.value, f"seed is {len(raw)} bytes, max {MAX_SEED_LEN}")
        return raw
    if seed.value not in values:
        raise MissingParamError(seed.value)
    return decode_pubkey(values[seed.value], seed.value)


def derive_pda(program_id: str, seeds: PdaSeeds, values: Mapping[str, str]) -> tuple[str, int]:
    """
    Derive the program address a seed list describes.

    Literal seeds are used as their UTF-8 bytes, referenced seeds as the
    32 raw bytes of the address supplied for that name.

    Args:
        program_id: Base58 address of the owning program
        seeds: Parsed seed list
        values: Referenced name -> base58 address

    Returns:
        (base58 address, bump seed)

    Raises:
        MissingParamError: A referenced seed has no address
        InvalidPubkeyError: An address is not a valid 32-byte key
        InvalidArgError: Too many seeds or a literal longer than 32 bytes
    """
    if len(seeds.seeds) > MAX_SEEDS:
        raise InvalidArgError("seeds", f"{len(seeds.seeds)} seeds, max {MAX_SEEDS}")
    seed_bytes = [_seed_bytes(seed, values) for seed in seeds.seeds]
    owner = Pubkey.from_bytes(decode_pubkey(program_id, "program_id"))
    address, bump = Pubkey.find_program_address(seed_bytes, owner)
    return str(address), bump
