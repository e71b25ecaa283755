"""Reward data models for the cultivation reward engine."""

from enum import Enum, StrEnum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _OrderedStrEnum(StrEnum):
    """String enum compared by declaration order instead of alphabetically.

    Plain strings are coerced to the enum before comparing, so an unknown
    value raises ValueError instead of falling back to alphabetical order.
    """

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def _rank_of(self, other):
        if isinstance(other, type(self)):
            return other.rank
        if isinstance(other, str) and not isinstance(other, Enum):
            return type(self)(other).rank
        return None

    def __lt__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank < rank

    def __le__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank <= rank

    def __gt__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank > rank

    def __ge__(self, other):
        rank = self._rank_of(other)
        return NotImplemented if rank is None else self.rank >= rank


class RarityTier(_OrderedStrEnum):
    """Loot rarity tiers, lowest to highest."""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class ElixirQuality(_OrderedStrEnum):
    """Elixir quality grades, lowest to highest."""
    FAN = "fan"    # mortal grade
    XUAN = "xuan"  # profound grade
    DI = "di"      # earth grade
    TIAN = "tian"  # heaven grade


class RewardType(StrEnum):
    """Reward categories."""
    MATERIAL = "material"
    FRAGMENT = "fragment"
    CURRENCY_PACK = "currency_pack"
    RELIC_FRAGMENT = "relic_fragment"
    SKILL_BOOK = "skill_book"


class _Reward(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identifier of the granted thing")
    count: int = Field(default=1, ge=1, description="Stack size")


class MaterialReward(_Reward):
    """Alchemy material, e.g. spirit_herb."""
    type: Literal["material"] = "material"


class FragmentReward(_Reward):
    """Recipe fragment."""
    type: Literal["fragment"] = "fragment"


class CurrencyPackReward(_Reward):
    """A pack of pills used as soft currency."""
    type: Literal["currency_pack"] = "currency_pack"
    id: str = Field(default="pills")


class RelicFragmentReward(_Reward):
    """Relic fragment."""
    type: Literal["relic_fragment"] = "relic_fragment"


class SkillBookReward(_Reward):
    """A whole kungfu skill book."""
    type: Literal["skill_book"] = "skill_book"


RewardItem = Annotated[
    Union[
        MaterialReward,
        FragmentReward,
        CurrencyPackReward,
        RelicFragmentReward,
        SkillBookReward,
    ],
    Field(discriminator="type"),
]

reward_item_adapter: TypeAdapter = TypeAdapter(RewardItem)


class LootTableDrop(BaseModel):
    """One weighted item template inside a rarity tier."""
    model_config = ConfigDict(frozen=True)

    item: RewardItem
    weight: int = Field(..., ge=0)


class LootTableEntry(BaseModel):
    """All weighted drops of one rarity tier."""
    model_config = ConfigDict(frozen=True)

    rarity: RarityTier
    drops: tuple[LootTableDrop, ...] = Field(..., min_length=1)

    @property
    def total_weight(self) -> int:
        return sum(drop.weight for drop in self.drops)

    def find_drop(self, item_id: str) -> Optional[LootTableDrop]:
        for drop in self.drops:
            if drop.item.id == item_id:
                return drop
        return None


def describe_reward(item: RewardItem) -> str:
    """Short human readable label for a reward."""
    if isinstance(item, MaterialReward):
        return f"{item.count}x material {item.id}"
    elif isinstance(item, FragmentReward):
        return f"{item.count}x fragment of {item.id}"
    elif isinstance(item, CurrencyPackReward):
        return f"{item.count}x {item.id}"
    elif isinstance(item, RelicFragmentReward):
        return f"{item.count}x relic fragment {item.id}"
    elif isinstance(item, SkillBookReward):
        return f"skill book {item.id}"
    raise TypeError(f"Unknown reward type: {type(item).__name__}")
