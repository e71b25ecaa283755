"""Final Trial.

A three step tribulation closing a run. Threat is fixed when the trial
starts and grows with how far the run was pushed; resolve comes from the
player's max HP and realm. Each step the player picks one action:

- steady: deterministic, damage reduced by resolve, +2 resolve
- gamble: one draw, 55% for low damage and +6 resolve, else heavy damage
- sacrifice: pay a resource for a shield, a heal or extra resolve

HP at 0 or below ends the trial as "dead" at once. Otherwise the ending is
classified from ``resolve - threat`` after the third step.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Mapping, Optional

from src.core.constants import (
    ASCEND_MIN_SCORE,
    DEFAULT_MAX_HP,
    DMG_PER_STEP,
    DMG_THREAT_RATIO,
    GAMBLE_FAIL_DMG_MUL,
    GAMBLE_SUCCESS_DMG_MUL,
    GAMBLE_SUCCESS_RATE,
    GAMBLE_SUCCESS_RESOLVE_GAIN,
    REALMS,
    RESOLVE_HP_RATIO,
    RESOLVE_PER_REALM,
    RETIRE_MIN_SCORE,
    STEADY_RESOLVE_GAIN,
    STEADY_RESOLVE_RATIO,
    THREAT_ALCHEMY_BONUS,
    THREAT_BASE,
    THREAT_MAX,
    THREAT_MIN,
    THREAT_PER_CHAIN,
    THREAT_PER_DANGER,
    THREAT_PER_REALM,
    TRIAL_STEPS,
)
from src.core.pity import PityState, add_kungfu_shards
from src.core.rng import Rng
from src.data.models.reward import ElixirQuality

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (not banker's rounding)."""
    return math.floor(value + 0.5)


class TrialAction(StrEnum):
    STEADY = "steady"
    GAMBLE = "gamble"
    SACRIFICE = "sacrifice"


class SacrificeKind(StrEnum):
    SPIRIT_STONES = "spirit_stones"
    PILLS = "pills"
    MATERIAL = "material"
    INHERITANCE = "inheritance"


class EndingId(StrEnum):
    ASCEND = "ascend"
    RETIRE = "retire"
    DEMON = "demon"
    DEAD = "dead"


# =============================================================================
# SNAPSHOTS
# =============================================================================

@dataclass(frozen=True)
class TrialSnapshot:
    """Read-only view of run progress used to set up the trial."""

    realm: str = REALMS[0]
    danger: float = 0.0
    chains_completed: int = 0
    best_alchemy_quality: Optional[ElixirQuality] = None
    max_hp: int = DEFAULT_MAX_HP


@dataclass(frozen=True)
class TrialResources:
    """Inventory counts used for sacrifice affordability checks."""

    spirit_stones: int = 0
    pills: int = 0
    materials: Mapping[str, int] = field(default_factory=dict)
    inheritance_points: int = 0


@dataclass(frozen=True)
class TrialState:
    """In-progress trial. ``step`` is 1-3 while running and 4 once complete."""

    threat: int
    resolve: int
    hp: int
    step: int = 1

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    @property
    def is_complete(self) -> bool:
        return self.step > TRIAL_STEPS

    @property
    def is_terminal(self) -> bool:
        return self.is_dead or self.is_complete


@dataclass(frozen=True)
class SacrificeSpec:
    """Price and effect of one sacrifice kind."""

    shield: int = 0
    heal: int = 0
    resolve_delta: int = 0
    spirit_stones: int = 0
    pills: int = 0
    material_id: Optional[str] = None
    material_count: int = 0
    inheritance_points: int = 0

    def affordable(self, resources: TrialResources) -> bool:
        if resources.spirit_stones < self.spirit_stones:
            return False
        if resources.pills < self.pills:
            return False
        if self.material_id is not None:
            if resources.materials.get(self.material_id, 0) < self.material_count:
                return False
        return resources.inheritance_points >= self.inheritance_points


SACRIFICES: dict[SacrificeKind, SacrificeSpec] = {
    SacrificeKind.SPIRIT_STONES: SacrificeSpec(shield=8, spirit_stones=50),
    SacrificeKind.PILLS: SacrificeSpec(heal=10, pills=2),
    SacrificeKind.MATERIAL: SacrificeSpec(shield=6, material_id="spirit_herb", material_count=3),
    SacrificeKind.INHERITANCE: SacrificeSpec(resolve_delta=5, inheritance_points=2),
}


@dataclass(frozen=True)
class ActionOutcome:
    """Damage and gains of one resolved action."""

    dmg: int
    resolve_delta: int = 0
    heal: int = 0
    shield: int = 0
    success: Optional[bool] = None  # gamble only


@dataclass(frozen=True)
class FinalRewards:
    """Permanent rewards granted by an ending."""

    legacy_bonus: int
    shards_bonus: int
    demon_unlock: bool = False


@dataclass(frozen=True)
class TrialStepResult:
    """
    Result of ``resolve_action``.

    ``executed`` is False when a sacrifice could not be afforded; the state is
    then the unchanged input and ``outcome`` is None.
    """

    state: TrialState
    executed: bool = True
    outcome: Optional[ActionOutcome] = None
    ending: Optional[EndingId] = None


# =============================================================================
# SETUP
# =============================================================================

def realm_index(realm: str) -> int:
    """Position of ``realm`` in the realm ladder; unknown realms count as mortal."""
    try:
        return REALMS.index(realm)
    except ValueError:
        return 0


def compute_threat(snapshot: TrialSnapshot) -> int:
    """Trial threat in [60, 140]; the further the run was pushed the higher."""
    alchemy_bonus = 0
    if snapshot.best_alchemy_quality is not None:
        alchemy_bonus = THREAT_ALCHEMY_BONUS.get(ElixirQuality(snapshot.best_alchemy_quality).value, 0)

    raw = (
        THREAT_BASE
        + realm_index(snapshot.realm) * THREAT_PER_REALM
        + snapshot.danger * THREAT_PER_DANGER
        + alchemy_bonus
        + snapshot.chains_completed * THREAT_PER_CHAIN
    )
    return round_half_up(max(THREAT_MIN, min(THREAT_MAX, raw)))


def compute_initial_resolve(snapshot: TrialSnapshot) -> int:
    return round_half_up(snapshot.max_hp * RESOLVE_HP_RATIO) + realm_index(snapshot.realm) * RESOLVE_PER_REALM


def start_trial(snapshot: TrialSnapshot, hp: int) -> TrialState:
    """Create the step 1 state. Threat and resolve are computed once here."""
    return TrialState(
        threat=compute_threat(snapshot),
        resolve=compute_initial_resolve(snapshot),
        hp=hp,
        step=1,
    )


# =============================================================================
# ACTIONS
# =============================================================================

def get_dmg_base(threat: int, step: int) -> int:
    """Baseline damage of a step; depends only on threat and step."""
    return round_half_up(threat * DMG_THREAT_RATIO) + step * DMG_PER_STEP


def steady_outcome(dmg_base: int, resolve: int) -> ActionOutcome:
    dmg = max(1, dmg_base - round_half_up(resolve * STEADY_RESOLVE_RATIO))
    return ActionOutcome(dmg=dmg, resolve_delta=STEADY_RESOLVE_GAIN)


def gamble_outcome(dmg_base: int, draw: float) -> ActionOutcome:
    """Gamble with an already drawn value in [0, 1)."""
    success = draw < GAMBLE_SUCCESS_RATE
    if success:
        return ActionOutcome(
            dmg=max(1, round_half_up(dmg_base * GAMBLE_SUCCESS_DMG_MUL)),
            resolve_delta=GAMBLE_SUCCESS_RESOLVE_GAIN,
            success=True,
        )
    return ActionOutcome(
        dmg=max(1, round_half_up(dmg_base * GAMBLE_FAIL_DMG_MUL)),
        resolve_delta=0,
        success=False,
    )


def can_sacrifice(resources: TrialResources, kind: SacrificeKind) -> bool:
    return SACRIFICES[SacrificeKind(kind)].affordable(resources)


def available_sacrifices(resources: TrialResources) -> list[SacrificeKind]:
    """Sacrifice kinds the player can currently pay for."""
    return [kind for kind in SacrificeKind if can_sacrifice(resources, kind)]


def sacrifice_deduction(kind: SacrificeKind) -> dict[str, object]:
    """What the caller must deduct from the inventory for a sacrifice."""
    cost = SACRIFICES[SacrificeKind(kind)]
    deduction: dict[str, object] = {}
    if cost.spirit_stones:
        deduction["spirit_stones"] = cost.spirit_stones
    if cost.pills:
        deduction["pills"] = cost.pills
    if cost.material_id is not None:
        deduction["material"] = {"id": cost.material_id, "count": cost.material_count}
    if cost.inheritance_points:
        deduction["inheritance_points"] = cost.inheritance_points
    return deduction


def sacrifice_outcome(dmg_base: int, kind: SacrificeKind) -> ActionOutcome:
    cost = SACRIFICES[SacrificeKind(kind)]
    return ActionOutcome(
        dmg=max(1, dmg_base - cost.shield),
        resolve_delta=cost.resolve_delta,
        heal=cost.heal,
        shield=cost.shield,
    )


# =============================================================================
# TRANSITIONS & ENDINGS
# =============================================================================

def compute_ending_id(hp: int, resolve: int, threat: int) -> EndingId:
    if hp <= 0:
        return EndingId.DEAD
    score = resolve - threat
    if score >= ASCEND_MIN_SCORE:
        return EndingId.ASCEND
    if score >= RETIRE_MIN_SCORE:
        return EndingId.RETIRE
    return EndingId.DEMON


def final_rewards(ending: EndingId) -> FinalRewards:
    ending = EndingId(ending)
    if ending == EndingId.ASCEND:
        return FinalRewards(legacy_bonus=3, shards_bonus=3)
    elif ending == EndingId.RETIRE:
        return FinalRewards(legacy_bonus=2, shards_bonus=2)
    elif ending == EndingId.DEMON:
        return FinalRewards(legacy_bonus=2, shards_bonus=1, demon_unlock=True)
    elif ending == EndingId.DEAD:
        return FinalRewards(legacy_bonus=1, shards_bonus=1)
    raise ValueError(f"Unknown ending: {ending}")


def apply_final_rewards(pity: PityState, rewards: FinalRewards) -> PityState:
    """Credit the ending's shard bonus to the pity ledger."""
    return add_kungfu_shards(pity, rewards.shards_bonus)


def resolve_action(
    state: TrialState,
    action: TrialAction,
    rng: Optional[Rng] = None,
    sacrifice_kind: Optional[SacrificeKind] = None,
    resources: Optional[TrialResources] = None,
    max_hp: Optional[int] = None,
) -> TrialStepResult:
    """
    Resolve one step of the trial.

    Args:
        state: Current trial state (must not be terminal).
        action: Chosen action.
        rng: Random source, required for gamble (consumes exactly 1 value).
        sacrifice_kind: Required for sacrifice.
        resources: Inventory snapshot, required for sacrifice.
        max_hp: Heal cap; uncapped when None.

    Returns:
        TrialStepResult with the new state and, once terminal, the ending.

    Raises:
        ValueError: If the trial is already over or arguments are missing.
    """
    if state.is_terminal or state.step < 1:
        raise ValueError(f"Trial is not in progress (step={state.step}, hp={state.hp})")

    action = TrialAction(action)
    dmg_base = get_dmg_base(state.threat, state.step)

    if action == TrialAction.STEADY:
        outcome = steady_outcome(dmg_base, state.resolve)
    elif action == TrialAction.GAMBLE:
        if rng is None:
            raise ValueError("Gamble needs a random source")
        outcome = gamble_outcome(dmg_base, rng.next())
    else:
        if sacrifice_kind is None or resources is None:
            raise ValueError("Sacrifice needs a kind and a resource snapshot")
        if not can_sacrifice(resources, sacrifice_kind):
            return TrialStepResult(state=state, executed=False)
        outcome = sacrifice_outcome(dmg_base, sacrifice_kind)

    hp = state.hp - outcome.dmg + outcome.heal
    if max_hp is not None and outcome.heal:
        hp = min(hp, max_hp)

    new_state = replace(
        state,
        hp=hp,
        resolve=state.resolve + outcome.resolve_delta,
        step=state.step + 1,
    )

    ending: Optional[EndingId] = None
    if new_state.is_dead:
        ending = EndingId.DEAD
    elif new_state.is_complete:
        ending = compute_ending_id(new_state.hp, new_state.resolve, new_state.threat)

    if ending is not None:
        logger.info(
            "Final trial ended: %s (hp=%d, resolve=%d, threat=%d)",
            ending.value, new_state.hp, new_state.resolve, new_state.threat,
        )

    return TrialStepResult(state=new_state, executed=True, outcome=outcome, ending=ending)
